from __future__ import annotations

import json
import os
from typing import Optional

import httpx
import typer
from rich.console import Console

from hookview.viewer import DEFAULT_URL, poll_events

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
    max_events: int = typer.Option(50, min=1, help="How many recent webhooks to keep in memory."),
    webhook_path: str = typer.Option("/api/webhook", help="Path for ingest (POST) and query (GET)."),
):
    os.environ["HOOKVIEW_MAX_EVENTS"] = str(max_events)
    os.environ["HOOKVIEW_WEBHOOK_PATH"] = webhook_path

    connect_host = "127.0.0.1" if host in ("0.0.0.0", "::") else host
    console.print(f"Starting server on http://{host}:{port}")
    console.print(f"Webhook: http://{connect_host}:{port}{webhook_path}")
    console.print("Watch:   [bold]hookview watch[/bold]")

    import uvicorn
    uvicorn.run("hookview_server.main:app", host=host, port=port, reload=False, log_level="info")


@app.command("watch")
def watch(
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="HOOKVIEW_URL", help="Webhook endpoint to poll."),
    interval: float = typer.Option(5.0, help="Polling interval seconds."),
    json_mode: bool = typer.Option(False, "--json", help="Print each event as raw JSON."),
    once: bool = typer.Option(False, "--once", help="Fetch a single snapshot and exit."),
):
    if not once:
        console.print(f"Polling {url} every {interval}s (Ctrl+C to stop)")
    try:
        poll_events(url=url, interval_s=interval, json_mode=json_mode, once=once)
    except KeyboardInterrupt:
        console.print("\n[cyan]stopped[/cyan]")


@app.command("send")
def send(
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="HOOKVIEW_URL", help="Webhook endpoint to post to."),
    data: str = typer.Option('{"hello":"world"}', "--data", "-d", help="Request body."),
    content_type: str = typer.Option("application/json", "--content-type", "-t", help="Content-Type header."),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Extra header as 'Name: value'."),
):
    headers = {"Content-Type": content_type}
    for h in header or []:
        name, sep, value = h.partition(":")
        if not sep or not name.strip():
            console.print(f"[red]bad header[/red]: {h!r} (expected 'Name: value')")
            raise typer.Exit(code=2)
        headers[name.strip()] = value.strip()

    try:
        r = httpx.post(url, content=data.encode("utf-8"), headers=headers, timeout=10.0)
        r.raise_for_status()
    except httpx.HTTPError as ex:
        console.print(f"[red]send failed[/red]: {ex}")
        raise typer.Exit(code=1)

    try:
        console.print_json(data=r.json())
    except json.JSONDecodeError:
        console.print(r.text)


if __name__ == "__main__":
    app()
