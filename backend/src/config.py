from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from utils import mask_secret

# LINE carousel templates accept at most 10 columns.
CAROUSEL_MAX_COLUMNS = 10


class Configuration(BaseModel):
    # LINE Messaging API
    line_channel_secret: Optional[str] = Field(default=None)
    line_channel_access_token: Optional[str] = Field(default=None)
    line_api_base_url: str = Field(default="https://api.line.me")
    line_data_base_url: str = Field(default="https://api-data.line.me")

    # Google Places
    places_api_key: Optional[str] = Field(default=None)
    places_base_url: str = Field(default="https://maps.googleapis.com")
    search_radius_m: int = Field(default=500)
    venue_type: str = Field(default="restaurant")
    language: str = Field(default="ja")
    photo_max_width: int = Field(default=400)

    # Reply
    max_results: int = Field(default=9)
    photo_workers: int = Field(default=4)
    placeholder_image_url: str = Field(default="https://placehold.jp/400x260.png?text=No%20Image")

    http_timeout: float = Field(default=10.0)

    @field_validator("max_results")
    @classmethod
    def _clamp_max_results(cls, value: int) -> int:
        return max(1, min(CAROUSEL_MAX_COLUMNS, value))

    @field_validator("photo_workers")
    @classmethod
    def _at_least_one_worker(cls, value: int) -> int:
        return max(1, value)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "line_channel_secret": os.getenv("LINE_CHANNEL_SECRET"),
            "line_channel_access_token": os.getenv("LINE_CHANNEL_TOKEN"),
            "line_api_base_url": os.getenv("LINE_API_BASE_URL"),
            "line_data_base_url": os.getenv("LINE_DATA_BASE_URL"),
            "places_api_key": os.getenv("KEY") or os.getenv("GOOGLE_PLACES_API_KEY"),
            "places_base_url": os.getenv("PLACES_BASE_URL"),
            "search_radius_m": os.getenv("SEARCH_RADIUS_M"),
            "venue_type": os.getenv("VENUE_TYPE"),
            "language": os.getenv("PLACES_LANGUAGE"),
            "photo_max_width": os.getenv("PHOTO_MAX_WIDTH"),
            "max_results": os.getenv("MAX_RESULTS"),
            "photo_workers": os.getenv("PHOTO_WORKERS"),
            "placeholder_image_url": os.getenv("PLACEHOLDER_IMAGE_URL"),
            "http_timeout": os.getenv("HTTP_TIMEOUT"),
        }

        for k, v in env_map.items():
            if v is None or not str(v).strip():
                continue
            raw[k] = v.strip()

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def require_line(self) -> None:
        if not self.line_channel_secret:
            raise ValueError("LINE_CHANNEL_SECRET is required")
        if not self.line_channel_access_token:
            raise ValueError("LINE_CHANNEL_TOKEN is required")

    def require_places(self) -> None:
        if not self.places_api_key:
            raise ValueError("KEY (Google Places API key) is required")

    def log_summary(self) -> str:
        return (
            "places=%s base=%s radius_m=%s type=%s lang=%s max_results=%s timeout=%s "
            "line_secret=%s line_token=%s api_key=%s"
            % (
                bool(self.places_api_key),
                self.places_base_url,
                self.search_radius_m,
                self.venue_type,
                self.language,
                self.max_results,
                self.http_timeout,
                mask_secret(self.line_channel_secret),
                mask_secret(self.line_channel_access_token),
                mask_secret(self.places_api_key),
            )
        )
