"""
Nearby-location query.

Bulk distance filter over candidates the persistence layer has already loaded and
projected into `NearbyCandidate` (coordinates + flat data). Storage-side
pre-filtering, if any, is the caller's job (see `core.geo.bounding_box`).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from geoverify.core.geo import distance
from geoverify.domain.models import NearbyCandidate, NearbyLocation

logger = logging.getLogger(__name__)


def find_nearby(
    user_lat: float,
    user_lon: float,
    candidates: Iterable[NearbyCandidate | Mapping[str, Any]],
    max_distance_m: float,
) -> list[NearbyLocation]:
    """Return candidates within `max_distance_m` of the user, nearest first.

    Ties keep their input order (`sorted` is stable).
    """
    matches: list[NearbyLocation] = []
    total = 0
    for candidate in candidates:
        total += 1
        if not isinstance(candidate, NearbyCandidate):
            candidate = NearbyCandidate.model_validate(candidate)
        d = distance(user_lat, user_lon, candidate.lat, candidate.lon)
        if d <= max_distance_m:
            matches.append(NearbyLocation(data=dict(candidate.data), distance=d))

    logger.debug("find_nearby: %d of %d candidates within %sm", len(matches), total, max_distance_m)
    return sorted(matches, key=lambda m: m.distance)
