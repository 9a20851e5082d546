"""Logging configuration for the hookview server."""
from __future__ import annotations

import logging
import sys

from .decoding import BodyResult
from .models import WebhookEvent

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def set_level(level: str) -> None:
    logging.getLogger("hookview_server").setLevel(level.upper())


def log_event(logger: logging.Logger, event: WebhookEvent, result: BodyResult) -> None:
    """Log a stored webhook in a structured format.

    Args:
        logger: Logger instance
        event: The event that was just appended
        result: Outcome of body decoding for the event
    """
    logger.info(
        "Webhook stored",
        extra={
            "event_id": event.id,
            "content_type": event.headers.get("content-type", ""),
            "body_kind": result.kind,
        }
    )
