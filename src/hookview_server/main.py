from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers

from . import __version__
from .settings import Settings
from .storage import EventStore
from .models import EventsOut, IngestAck, WebhookEvent
from .decoding import Unparsed, body_value, decode_body
from .logging_config import get_logger, log_event, set_level

logger = get_logger(__name__)


def collect_headers(headers: Headers) -> Dict[str, str]:
    """Flatten request headers into a name -> value mapping.

    Names are lower-case. Repeated headers are joined with ", " in the order
    they arrived.
    """
    out: Dict[str, str] = {}
    for k, v in headers.items():
        kl = k.lower()
        out[kl] = f"{out[kl]}, {v}" if kl in out else v
    return out


def get_store(request: Request) -> EventStore:
    return request.app.state.store


def create_app(settings: Optional[Settings] = None, store: Optional[EventStore] = None) -> FastAPI:
    settings = settings or Settings()  # reads env
    store = store or EventStore(capacity=settings.max_events)
    start_time = time.time()
    set_level(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting hookview server",
            extra={"webhook_path": settings.webhook_path, "capacity": store.capacity},
        )
        yield
        logger.info("Shutting down hookview server")

    app = FastAPI(
        title="hookview",
        description="In-memory webhook receiver and viewer",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.start_time = start_time

    if settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list(),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/healthz", tags=["Health"])
    async def healthz(request: Request, store: EventStore = Depends(get_store)):
        """Health check endpoint with service status."""
        uptime = time.time() - request.app.state.start_time
        return {
            "ok": True,
            "service": settings.service_name,
            "version": __version__,
            "uptime_seconds": int(uptime),
            "stored_events": len(store),
            "capacity": store.capacity,
        }

    @app.post(settings.webhook_path, response_model=IngestAck, tags=["Webhook"])
    async def ingest(request: Request, store: EventStore = Depends(get_store)):
        """Record any inbound request as a webhook event."""
        headers = collect_headers(request.headers)
        raw = await request.body()
        result = decode_body(raw, headers.get("content-type", ""))
        if isinstance(result, Unparsed):
            logger.debug(f"Body left unparsed: {result.reason}")

        event = WebhookEvent(headers=headers, body=body_value(result))
        store.append(event)

        log_event(logger, event, result)
        return IngestAck(stored=event.id)

    @app.get(settings.webhook_path, response_model=EventsOut, tags=["Webhook"])
    async def list_events(store: EventStore = Depends(get_store)):
        """Return every stored event, most recent first."""
        return EventsOut(events=store.read_all())

    return app


app = create_app()
