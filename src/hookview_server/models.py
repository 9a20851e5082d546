from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WebhookEvent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    received_at: str = Field(default_factory=utc_now_iso, alias="receivedAt")

    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None


class IngestAck(BaseModel):
    ok: bool = True
    stored: str


class EventsOut(BaseModel):
    events: List[WebhookEvent] = Field(default_factory=list)
