"""Best-effort decoding of inbound webhook bodies.

Every body goes through the same chain and ends up as exactly one of three
tagged results:

* ``Decoded`` - a structured value parsed from a JSON-family payload.
* ``DecodedText`` - the payload as text (declared textual content, or the
  raw-text fallback for anything else). The fallback is a lossy utf-8
  decode: invalid bytes become U+FFFD, so it never fails.
* ``Unparsed`` - a JSON-family payload that is not valid JSON; stored as an
  absent body.

An empty body is always ``DecodedText("")`` whatever the content type: there
is nothing for the JSON reader to consume.

Decoding never raises, so ingest never rejects a request because of its body.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class Decoded:
    value: Any
    kind: str = "json"


@dataclass(frozen=True)
class DecodedText:
    text: str
    kind: str = "text"


@dataclass(frozen=True)
class Unparsed:
    reason: str = ""
    kind: str = "unparsed"


BodyResult = Union[Decoded, DecodedText, Unparsed]


def parse_content_type(content_type: str) -> Tuple[str, Optional[str]]:
    """Split a Content-Type header into (media type, charset)."""
    parts = [p.strip() for p in (content_type or "").split(";")]
    media_type = parts[0].lower()
    charset = None
    for param in parts[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            charset = value.strip().strip('"')
    return media_type, charset


def is_json_type(content_type: str) -> bool:
    media_type, _ = parse_content_type(content_type)
    return "application/json" in content_type.lower() or media_type.endswith("+json")


def is_text_type(content_type: str) -> bool:
    return "text/" in content_type.lower()


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and could not be served back out.
    raise ValueError(f"non-standard JSON constant {name}")


def _raw_text(raw: bytes) -> BodyResult:
    return DecodedText(raw.decode("utf-8", errors="replace"))


def decode_body(raw: bytes, content_type: str) -> BodyResult:
    """Decode ``raw`` according to ``content_type``.

    Args:
        raw: Request body bytes (possibly empty)
        content_type: Value of the Content-Type header, or ""

    Returns:
        One of Decoded, DecodedText or Unparsed
    """
    content_type = content_type or ""
    if not raw:
        return DecodedText("")

    if is_json_type(content_type):
        # The body has been claimed by the JSON reader; a broken payload is
        # recorded as absent rather than re-read as text.
        try:
            return Decoded(json.loads(raw, parse_constant=_reject_constant))
        except ValueError as exc:
            return Unparsed(f"invalid json: {exc}")

    if is_text_type(content_type):
        _, charset = parse_content_type(content_type)
        try:
            return DecodedText(raw.decode(charset or "utf-8"))
        except (LookupError, UnicodeDecodeError):
            pass

    return _raw_text(raw)


def body_value(result: BodyResult) -> Any:
    """Return the value stored on the event for a decode result."""
    if isinstance(result, Decoded):
        return result.value
    if isinstance(result, DecodedText):
        return result.text
    return None
