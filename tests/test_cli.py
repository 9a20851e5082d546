"""Tests for the hookview command line."""
from __future__ import annotations

import httpx
from typer.testing import CliRunner

import hookview.main as cli
from hookview import viewer
from hookview.main import app

runner = CliRunner()

URL = "http://hooks.test/api/webhook"


def fake_post(status_code=200, payload=None, calls=None):
    def post(url, content=None, headers=None, timeout=None):
        if calls is not None:
            calls.append({"url": url, "content": content, "headers": headers})
        request = httpx.Request("POST", url)
        return httpx.Response(status_code, json=payload, request=request)

    return post


def test_send_default_payload(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.httpx, "post", fake_post(payload={"ok": True, "stored": "abc"}, calls=calls))

    result = runner.invoke(app, ["send", "--url", URL])
    assert result.exit_code == 0
    assert '"stored": "abc"' in result.output
    assert calls[0]["url"] == URL
    assert calls[0]["content"] == b'{"hello":"world"}'
    assert calls[0]["headers"] == {"Content-Type": "application/json"}


def test_send_extra_headers(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.httpx, "post", fake_post(payload={"ok": True, "stored": "abc"}, calls=calls))

    result = runner.invoke(
        app,
        ["send", "--url", URL, "-d", "hi", "-t", "text/plain", "-H", "X-Event: push", "-H", "X-Trace:  a:b "],
    )
    assert result.exit_code == 0
    assert calls[0]["content"] == b"hi"
    assert calls[0]["headers"] == {"Content-Type": "text/plain", "X-Event": "push", "X-Trace": "a:b"}


def test_send_bad_header(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.httpx, "post", fake_post(calls=calls))

    result = runner.invoke(app, ["send", "--url", URL, "-H", "no-colon"])
    assert result.exit_code == 2
    assert "bad header" in result.output
    assert calls == []


def test_send_http_error(monkeypatch):
    monkeypatch.setattr(cli.httpx, "post", fake_post(status_code=500, payload={"detail": "boom"}))

    result = runner.invoke(app, ["send", "--url", URL])
    assert result.exit_code == 1
    assert "send failed" in result.output


def test_watch_once(monkeypatch):
    events = [{"id": "evt-1", "receivedAt": "2026-10-19T10:00:00.000Z", "headers": {}, "body": "ping"}]
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"events": events}))
    seen = {}

    def poll(**kwargs):
        seen.update(kwargs)
        viewer.poll_events(transport=transport, **kwargs)

    monkeypatch.setattr(cli, "poll_events", poll)
    monkeypatch.setenv("HOOKVIEW_URL", URL)

    result = runner.invoke(app, ["watch", "--once"])
    assert result.exit_code == 0
    assert seen["url"] == URL
    assert seen["once"] is True
    assert "1 hits" in result.output
    assert "ping" in result.output


def test_watch_stops_on_interrupt(monkeypatch):
    def poll(**kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "poll_events", poll)

    result = runner.invoke(app, ["watch", "--url", URL, "--interval", "1"])
    assert result.exit_code == 0
    assert "stopped" in result.output
