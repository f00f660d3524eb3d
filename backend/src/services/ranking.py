from __future__ import annotations

from typing import Iterable, List, Tuple

from models import VenueCandidate


def _rating_key(venue: VenueCandidate) -> Tuple[int, float]:
    # Rated venues (bucket 0) always come before unrated ones (bucket 1),
    # whatever the numeric rating, including 0.0.
    if venue.rating is None:
        return (1, 0.0)
    return (0, -venue.rating)


def rank_venues(venues: Iterable[VenueCandidate], *, max_results: int = 9) -> List[VenueCandidate]:
    """Order venues by descending rating and cap the list.

    ``sorted`` is stable, so venues with equal ratings keep the order the
    provider returned them in. Venues without a rating go last.
    """
    max_results = max(1, max_results)
    ranked = sorted(venues, key=_rating_key)
    return ranked[:max_results]
