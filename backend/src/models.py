"""Data models for the LINE restaurant bot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")

    def as_query(self) -> str:
        return f"{self.lat},{self.lon}"


@dataclass(frozen=True)
class VenueCandidate:
    name: str
    coordinates: Coordinates
    photo_reference: Optional[str] = None
    rating: Optional[float] = None  # None means the provider sent no rating
    address: Optional[str] = None
    place_id: Optional[str] = None


@dataclass(frozen=True)
class ReplyColumn:
    title: str
    rating_text: str
    thumbnail_url: str
    map_uri: str


@dataclass
class ReplyPayload:
    columns: list[ReplyColumn] = field(default_factory=list)
    alt_text: str = "近くのお店"


# Inbound webhook events. Exactly one of these is produced per LINE event.


@dataclass(frozen=True)
class TextEvent:
    reply_token: Optional[str]
    text: str


@dataclass(frozen=True)
class MediaEvent:
    reply_token: Optional[str]
    message_id: str
    media_type: str  # "image" | "video"


@dataclass(frozen=True)
class LocationEvent:
    reply_token: Optional[str]
    coordinates: Coordinates
    address: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class OtherEvent:
    type: str
    reply_token: Optional[str] = None


Event = Union[TextEvent, MediaEvent, LocationEvent, OtherEvent]


@dataclass
class OutboundReply:
    reply_token: str
    messages: list[dict[str, Any]] = field(default_factory=list)
