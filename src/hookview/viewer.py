from __future__ import annotations

import json
import time
from datetime import datetime
from typing import Any, List, Optional, Set

import httpx
from rich.console import Console
from rich.table import Table

console = Console()

DEFAULT_URL = "http://127.0.0.1:8080/api/webhook"


def format_body(body: Any) -> str:
    if body is None:
        return "No body received"
    if isinstance(body, str):
        return body or "Empty string"
    try:
        return json.dumps(body, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return "Could not render body"


def format_time(value: str) -> str:
    """Render an ISO-8601 timestamp in local time, e.g. '19 Oct 2026, 14:05'."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return str(value)
    return dt.astimezone().strftime("%d %b %Y, %H:%M")


def _render_event(e: dict) -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_row("[bold]hit id[/bold]", str(e.get("id", "")))
    table.add_row("[bold]time[/bold]", format_time(e.get("receivedAt", "")))
    console.print(table)

    headers = e.get("headers") or {}
    if headers:
        ht = Table(title="Headers", title_justify="left", show_header=False, pad_edge=False)
        for k, v in headers.items():
            ht.add_row(f"[bold]{k}[/bold]", str(v))
        console.print(ht)

    console.print("[bold]Body[/bold]")
    console.print(format_body(e.get("body")), markup=False, highlight=False)
    console.print("-" * 60)


def render_summary(events: List[dict]) -> None:
    line = f"[bold]{len(events)} hits[/bold]"
    if events:
        line += f"  last received: {format_time(events[0].get('receivedAt', ''))}"
    console.print(line)


def fetch_events(client: httpx.Client, url: str) -> List[dict]:
    r = client.get(url, headers={"Cache-Control": "no-store"})
    r.raise_for_status()
    payload = r.json()
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    events = payload.get("events") or []
    if not isinstance(events, list) or not all(isinstance(e, dict) for e in events):
        raise ValueError("'events' is not a list of objects")
    return events


def poll_events(
    *,
    url: str,
    interval_s: float = 5.0,
    json_mode: bool = False,
    once: bool = False,
    timeout_s: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> None:
    """Poll the webhook list and print events not seen before.

    Events arrive newest first; new ones are printed oldest first so the
    terminal scrolls in arrival order. Failures are reported and retried on
    the next tick.
    """
    seen: Set[str] = set()
    with httpx.Client(timeout=timeout_s, follow_redirects=True, transport=transport) as client:
        while True:
            try:
                events = fetch_events(client, url)
                fresh = [e for e in events if e.get("id") not in seen]
                for e in reversed(fresh):
                    if json_mode:
                        console.print_json(data=e)
                    else:
                        _render_event(e)
                if fresh or once:
                    render_summary(events)
                # ids that fell out of the server's window cannot come back
                seen = {e.get("id") for e in events}
            except KeyboardInterrupt:
                raise
            except (httpx.HTTPError, ValueError) as ex:
                console.print(f"[red]poll error[/red]: Failed to load webhooks ({ex})")
            if once:
                return
            time.sleep(max(0.2, interval_s))
