from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from loguru import logger

from config import Configuration
from models import ReplyColumn, ReplyPayload, VenueCandidate
from services.photos import PhotoResolutionFailure, PhotoResolver
from utils import is_http_url, truncate

MAP_SEARCH_URL = "https://www.google.com/maps/search/"

RATING_PREFIX = "⭐️"
NO_RATING_TEXT = "評価なし"
UNKNOWN_TITLE = "名称不明"
MAP_ACTION_LABEL = "地図で見る"

# LINE carousel column limits
TITLE_MAX = 40
TEXT_MAX = 60
ALT_TEXT_MAX = 400

APOLOGY_TEXT = "ごめんなさい、近くにお店が見つかりませんでした。場所を変えてもう一度送ってみてください。"


def format_rating(rating: Optional[float]) -> str:
    if rating is None:
        return f"{RATING_PREFIX} {NO_RATING_TEXT}"
    return f"{RATING_PREFIX} {rating:.1f}"


def map_uri(venue: VenueCandidate) -> str:
    params = {"api": 1, "query": venue.coordinates.as_query()}
    if venue.place_id:
        params["query_place_id"] = venue.place_id
    return f"{MAP_SEARCH_URL}?{urlencode(params)}"


def apology_message() -> Dict[str, Any]:
    return {"type": "text", "text": APOLOGY_TEXT}


class ReplyComposer:
    def __init__(self, cfg: Configuration, photos: PhotoResolver) -> None:
        self.cfg = cfg
        self.photos = photos

    def _thumbnail(self, venue: VenueCandidate) -> str:
        placeholder = self.cfg.placeholder_image_url
        if not venue.photo_reference:
            return placeholder
        try:
            url = self.photos.resolve(venue.photo_reference)
        except PhotoResolutionFailure as exc:
            logger.warning("photo for {} unavailable, using placeholder: {}", venue.name, exc)
            return placeholder
        # LINE only accepts https thumbnails.
        if not is_http_url(url, https_only=True):
            logger.warning("photo for {} resolved to unusable url {!r}", venue.name, url)
            return placeholder
        return url

    def compose(self, ranked: List[VenueCandidate]) -> ReplyPayload:
        venues = list(ranked[: self.cfg.max_results])
        if not venues:
            return ReplyPayload(columns=[])

        workers = min(self.cfg.photo_workers, len(venues))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order
            thumbnails = list(executor.map(self._thumbnail, venues))

        columns = [
            ReplyColumn(
                title=truncate(venue.name.strip() or UNKNOWN_TITLE, TITLE_MAX),
                rating_text=truncate(format_rating(venue.rating), TEXT_MAX),
                thumbnail_url=thumb,
                map_uri=map_uri(venue),
            )
            for venue, thumb in zip(venues, thumbnails)
        ]
        alt_text = truncate("近くのお店: " + " / ".join(c.title for c in columns), ALT_TEXT_MAX)
        return ReplyPayload(columns=columns, alt_text=alt_text)


def to_line_message(payload: ReplyPayload) -> Dict[str, Any]:
    """Render a payload as a LINE carousel template message."""
    columns = []
    for col in payload.columns:
        action = {"type": "uri", "label": MAP_ACTION_LABEL, "uri": col.map_uri}
        columns.append(
            {
                "thumbnailImageUrl": col.thumbnail_url,
                "imageBackgroundColor": "#FFFFFF",
                "title": col.title,
                "text": col.rating_text,
                "defaultAction": action,
                "actions": [action],
            }
        )
    return {
        "type": "template",
        "altText": payload.alt_text,
        "template": {
            "type": "carousel",
            "imageAspectRatio": "rectangle",
            "imageSize": "cover",
            "columns": columns,
        },
    }
