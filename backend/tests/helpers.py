from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock

from config import Configuration


def make_cfg(**overrides: Any) -> Configuration:
    base = {
        "line_channel_secret": "channel-secret",
        "line_channel_access_token": "channel-token",
        "places_api_key": "places-key",
    }
    base.update(overrides)
    return Configuration(**base)


def fake_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    headers: Optional[dict] = None,
    content: bytes = b"",
) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.text = text
    resp.headers = headers or {}
    resp.content = content
    if isinstance(json_data, Exception):
        resp.json.side_effect = json_data
    else:
        resp.json.return_value = json_data
    return resp


def place_result(
    name: str,
    rating: Any = None,
    photo: Optional[str] = None,
    lat: float = 35.0,
    lng: float = 139.0,
) -> dict:
    item: dict = {"name": name, "geometry": {"location": {"lat": lat, "lng": lng}}}
    if rating is not None:
        item["rating"] = rating
    if photo:
        item["photos"] = [{"photo_reference": photo, "width": 800, "height": 600}]
    return item
