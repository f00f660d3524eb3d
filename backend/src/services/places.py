from __future__ import annotations

import math
from typing import Any, List, Optional

import requests
from loguru import logger

from config import Configuration
from models import Coordinates, VenueCandidate
from services.ranking import rank_venues

NEARBY_SEARCH_PATH = "/maps/api/place/nearbysearch/json"


class SearchFailure(RuntimeError):
    pass


def _parse_rating(value: Any) -> Optional[float]:
    # bool is an int subclass; a JSON true is not a rating.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _parse_photo_reference(result: dict) -> Optional[str]:
    photos = result.get("photos")
    if not isinstance(photos, list) or not photos:
        return None
    first = photos[0] if isinstance(photos[0], dict) else {}
    ref = first.get("photo_reference")
    if isinstance(ref, str) and ref.strip():
        return ref.strip()
    return None


def parse_results(results: List[dict]) -> List[VenueCandidate]:
    """Map Nearby Search ``results`` entries to venues, in provider order."""
    venues: list[VenueCandidate] = []
    for item in results:
        if not isinstance(item, dict):
            continue
        geometry = item.get("geometry")
        location = geometry.get("location") if isinstance(geometry, dict) else None
        if not isinstance(location, dict):
            location = {}
        lat = location.get("lat")
        lng = location.get("lng")
        try:
            coords = Coordinates(lat=float(lat), lon=float(lng))
        except (TypeError, ValueError):
            logger.debug("skipping place without usable location: {}", item.get("name"))
            continue

        name = str(item.get("name") or "").strip()
        venues.append(
            VenueCandidate(
                name=name,
                coordinates=coords,
                photo_reference=_parse_photo_reference(item),
                rating=_parse_rating(item.get("rating")),
                address=(str(item["vicinity"]) if item.get("vicinity") else None),
                place_id=(str(item["place_id"]) if item.get("place_id") else None),
            )
        )
    return venues


class PlaceSearchClient:
    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.base = cfg.places_base_url.rstrip("/")
        self.session = session or requests.Session()

    def _get(self, path: str, params: dict) -> dict:
        url = f"{self.base}{path}"
        headers = {"Accept": "application/json"}
        params = {**params, "key": self.cfg.places_api_key}
        try:
            resp = self.session.get(url, headers=headers, params=params, timeout=self.cfg.http_timeout)
        except requests.RequestException as exc:
            raise SearchFailure(f"request error: {exc}") from exc

        if not resp.ok:
            snippet = resp.text[:300]
            raise SearchFailure(f"upstream {resp.status_code}: {snippet}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise SearchFailure("invalid json response") from exc
        if not isinstance(payload, dict):
            raise SearchFailure("unexpected json document")
        return payload

    def search(
        self,
        coordinates: Coordinates,
        radius_m: Optional[int] = None,
        venue_type: Optional[str] = None,
        language: Optional[str] = None,
    ) -> List[VenueCandidate]:
        radius_m = self.cfg.search_radius_m if radius_m is None else radius_m
        if radius_m <= 0:
            raise ValueError(f"radius must be positive: {radius_m}")

        params = {
            "location": coordinates.as_query(),
            "radius": radius_m,
            "type": venue_type or self.cfg.venue_type,
            "language": language or self.cfg.language,
        }
        payload = self._get(NEARBY_SEARCH_PATH, params)

        status = payload.get("status", "OK")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            detail = payload.get("error_message") or "no detail"
            raise SearchFailure(f"places status {status}: {detail}")

        results = payload.get("results")
        if not isinstance(results, list):
            raise SearchFailure("response has no results array")

        venues = parse_results(results)
        ranked = rank_venues(venues, max_results=self.cfg.max_results)
        logger.debug(
            "nearby search at {} radius={} returned {} results, kept {}",
            coordinates.as_query(),
            radius_m,
            len(results),
            len(ranked),
        )
        return ranked
