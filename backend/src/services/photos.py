from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

import requests

from config import Configuration

PHOTO_PATH = "/maps/api/place/photo"
REDIRECT_STATUSES = (301, 302, 303, 307, 308)


class PhotoResolutionFailure(RuntimeError):
    pass


class PhotoResolver:
    """Exchanges a Places photo reference for the image URL it redirects to.

    The photo endpoint answers with a redirect; only the ``Location`` header is
    read, the response body is ignored.
    """

    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.url = f"{cfg.places_base_url.rstrip('/')}{PHOTO_PATH}"
        self.session = session or requests.Session()

    def resolve(self, photo_reference: str) -> str:
        if not photo_reference:
            raise ValueError("photo_reference must be non-empty")

        params = {
            "maxwidth": self.cfg.photo_max_width,
            "photoreference": photo_reference,
            "key": self.cfg.places_api_key,
        }
        try:
            resp = self.session.get(
                self.url,
                params=params,
                allow_redirects=False,
                timeout=self.cfg.http_timeout,
            )
        except requests.RequestException as exc:
            raise PhotoResolutionFailure(f"request error: {exc}") from exc

        if resp.status_code not in REDIRECT_STATUSES:
            raise PhotoResolutionFailure(f"expected redirect, got {resp.status_code}")

        location = resp.headers.get("Location")
        if not location:
            raise PhotoResolutionFailure("redirect without Location header")
        try:
            return urljoin(self.url, location)
        except ValueError as exc:
            raise PhotoResolutionFailure(f"unusable Location header {location!r}: {exc}") from exc
