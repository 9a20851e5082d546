from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List

from .models import WebhookEvent

DEFAULT_CAPACITY = 50


class EventStore:
    """Bounded in-memory history of received webhooks, newest first.

    When an append would exceed ``capacity`` the oldest events are dropped.
    A lock guards every mutation and snapshot, so concurrent appends from
    threaded workers never lose events or overshoot the capacity.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._events: Deque[WebhookEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def append(self, event: WebhookEvent) -> None:
        with self._lock:
            # appendleft on a full bounded deque evicts from the right (oldest)
            self._events.appendleft(event)

    def read_all(self) -> List[WebhookEvent]:
        """Return a snapshot of the stored events, most recent first."""
        with self._lock:
            return list(self._events)
