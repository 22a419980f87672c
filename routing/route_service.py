#Purpose: Route preparation for downstream use.
#Turns whatever a travel record stores (encoded polyline, JSON-like waypoint list)
#into a clean coordinate sequence the insertion evaluator can consume:
#validation, adjacent-duplicate removal, anchoring the driver's start/end,
#and size-bounding through the simplifier.
#It's the "I need a usable route" module, while geofence.py is "is this passenger even close".

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Optional, Sequence

from .errors import InvalidCoordinate
from .models import Coordinate, ensure_coordinate
from .polyline import decode_polyline
from .simplify import simplify_route_waypoints

logger = logging.getLogger(__name__)

# adjacent points closer than this (degrees, per axis) are the same waypoint
DUPLICATE_TOLERANCE_DEG = 1e-6

# a route end this close (degrees, per axis) to the travel's start/end already covers it
ENDPOINT_TOLERANCE_DEG = 1e-5

# bound on how many times prepare_route_for_evaluation loosens the tolerance
MAX_TOLERANCE_DOUBLINGS = 16


def sanitize_route_waypoints(waypoints: Optional[Iterable[Any]]) -> Optional[List[Coordinate]]:
    """
    Validate waypoints and drop adjacent duplicates.

    Returns None when fewer than two distinct points remain.
    Raises InvalidCoordinate on any unusable point (incomplete, non-finite, out of range).
    """
    if not waypoints:
        return None

    normalized: List[Coordinate] = []
    for waypoint in waypoints:
        if waypoint is None:
            raise InvalidCoordinate("route waypoints include an empty value")
        coordinate = ensure_coordinate(waypoint)

        if normalized and _is_close(normalized[-1], coordinate, DUPLICATE_TOLERANCE_DEG):
            continue
        normalized.append(coordinate)

    return normalized if len(normalized) >= 2 else None


def parse_stored_route_waypoints(stored: Any) -> Optional[List[Coordinate]]:
    """
    Read a stored JSON-like waypoint list ([{"latitude": .., "longitude": ..}, ...]).

    Accepts lat/lng as alternative keys. Entries that are not mappings or whose
    values are not finite numbers are skipped; anything that is not a list yields None.
    """
    if not stored or not isinstance(stored, list):
        return None

    candidates: List[Coordinate] = []
    for raw in stored:
        if not isinstance(raw, dict):
            continue

        latitude = _finite_or_none(raw.get("latitude", raw.get("lat")))
        longitude = _finite_or_none(raw.get("longitude", raw.get("lng")))
        if latitude is None or longitude is None:
            continue

        candidates.append(ensure_coordinate((latitude, longitude)))

    return sanitize_route_waypoints(candidates)


def ensure_route_endpoints(
    route: Sequence[Coordinate],
    start: Coordinate,
    end: Coordinate,
) -> List[Coordinate]:
    """
    Make sure the route begins at the travel's start and finishes at its end.
    Missing endpoints are added; the input sequence is not modified.
    """
    anchored = list(route)

    if not anchored or not _is_close(anchored[0], start, ENDPOINT_TOLERANCE_DEG):
        anchored.insert(0, start)

    if not _is_close(anchored[-1], end, ENDPOINT_TOLERANCE_DEG):
        anchored.append(end)

    return anchored


def route_from_polyline(encoded: Optional[str]) -> Optional[List[Coordinate]]:
    """Decode a stored polyline and sanitize it. None when it holds < 2 distinct points."""
    return sanitize_route_waypoints(decode_polyline(encoded))


def prepare_route_for_evaluation(
    route: Sequence[Coordinate],
    *,
    max_points: int,
    tolerance_meters: float,
) -> List[Coordinate]:
    """
    Bound the size of a route before the O(n^2) insertion search.

    Routes with at most max_points points are returned unchanged (as a new list).
    Longer routes are simplified, doubling the tolerance until they fit or the
    doubling budget runs out.
    """
    if max_points < 2:
        raise ValueError("max_points must be >= 2")

    if len(route) <= max_points:
        return list(route)

    tolerance = max(float(tolerance_meters), 1.0)
    simplified = simplify_route_waypoints(route, tolerance)
    doublings = 0
    while len(simplified) > max_points and doublings < MAX_TOLERANCE_DOUBLINGS:
        tolerance *= 2
        doublings += 1
        simplified = simplify_route_waypoints(route, tolerance)

    logger.debug(
        "prepared route: %d -> %d points (tolerance %.1f m)",
        len(route), len(simplified), tolerance,
    )
    return simplified


# -------------------------
# Internal helpers
# -------------------------

def _is_close(a: Coordinate, b: Coordinate, tolerance_deg: float) -> bool:
    return (
        abs(a.latitude - b.latitude) <= tolerance_deg
        and abs(a.longitude - b.longitude) <= tolerance_deg
    )


def _finite_or_none(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
