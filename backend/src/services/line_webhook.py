"""Inbound LINE webhook: signature check and event parsing."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from typing import Any, List, Optional

from loguru import logger

from models import Coordinates, Event, LocationEvent, MediaEvent, OtherEvent, TextEvent

MEDIA_TYPES = ("image", "video")


class SignatureInvalid(RuntimeError):
    pass


class MalformedWebhook(RuntimeError):
    pass


def compute_signature(body: bytes, channel_secret: str) -> str:
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def validate_signature(body: bytes, signature: Optional[str], channel_secret: str) -> None:
    """Raise ``SignatureInvalid`` unless ``signature`` is the body's HMAC-SHA256."""
    if not signature:
        raise SignatureInvalid("missing X-Line-Signature header")
    expected = compute_signature(body, channel_secret)
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
        raise SignatureInvalid("signature mismatch")


def _to_event(raw: dict[str, Any]) -> Event:
    event_type = str(raw.get("type") or "unknown")
    reply_token = raw.get("replyToken") or None
    if event_type != "message":
        return OtherEvent(type=event_type, reply_token=reply_token)

    message = raw.get("message")
    if not isinstance(message, dict):
        logger.warning("message event without a message object: {!r}", message)
        return OtherEvent(type="message.invalid", reply_token=reply_token)
    message_type = message.get("type")

    if message_type == "text":
        return TextEvent(reply_token=reply_token, text=str(message.get("text") or ""))

    if message_type in MEDIA_TYPES and message.get("id"):
        return MediaEvent(reply_token=reply_token, message_id=str(message["id"]), media_type=message_type)

    if message_type == "location":
        try:
            coords = Coordinates(lat=float(message["latitude"]), lon=float(message["longitude"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("location message with unusable coordinates: {}", exc)
            return OtherEvent(type="message.location.invalid", reply_token=reply_token)
        return LocationEvent(
            reply_token=reply_token,
            coordinates=coords,
            address=message.get("address"),
            title=message.get("title"),
        )

    return OtherEvent(type=f"message.{message_type or 'unknown'}", reply_token=reply_token)


def parse_events(body: bytes) -> List[Event]:
    try:
        document = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedWebhook(f"invalid json body: {exc}") from exc

    if not isinstance(document, dict):
        raise MalformedWebhook("webhook body must be a json object")
    raw_events = document.get("events")
    if raw_events is None:
        return []
    if not isinstance(raw_events, list):
        raise MalformedWebhook("events must be a list")

    events: list[Event] = []
    for raw in raw_events:
        if not isinstance(raw, dict):
            logger.warning("skipping non-object webhook event: {!r}", raw)
            continue
        events.append(_to_event(raw))
    return events
