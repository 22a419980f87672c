#Purpose: Cheap geometric geofencing of a passenger against a driver route.
#Builds the route's bounding box, grows it by a margin in meters, and checks that
#both the pickup and the dropoff fall inside.
#Used by the matching engine to reject far-away travels before paying for the
#O(n^2) insertion search.
#Output: a yes/no answer, no metrics.

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .geometry import (
    ARC_METERS_PER_DEGREE,
    METERS_PER_DEGREE,
    MIN_MERIDIAN_SCALE,
    compute_route_bounding_box,
    contains_coordinate,
    expand_bounding_box,
)
from .models import Coordinate, RouteBoundingBox

logger = logging.getLogger(__name__)

# relative widening of a deviation-derived margin, covers great-circle bulge
DEVIATION_MARGIN_SLACK = 0.01


def route_geofence(route: Sequence[Coordinate], margin_meters: float) -> Optional[RouteBoundingBox]:
    """
    Bounding box of the route expanded by margin_meters.
    None for an empty route.
    """
    box = compute_route_bounding_box(route)
    if box is None:
        return None
    return expand_bounding_box(box, margin_meters)


def passenger_within_geofence(
    route: Sequence[Coordinate],
    pickup: Coordinate,
    dropoff: Coordinate,
    margin_meters: float,
) -> bool:
    """
    True when both pickup and dropoff lie inside the route's geofence.

    An empty route has no geofence, so nothing is ever inside it.
    """
    fence = route_geofence(route, margin_meters)
    if fence is None:
        return False

    inside = contains_coordinate(pickup, fence) and contains_coordinate(dropoff, fence)
    if not inside:
        logger.debug("passenger outside route geofence (margin %.0f m)", margin_meters)
    return inside


def deviation_geofence_margin(route: Sequence[Coordinate], deviation_meters: float) -> float:
    """
    Box margin (meters, for expand_bounding_box) that keeps every point within
    deviation_meters of the route inside the geofence.

    expand_bounding_box converts at 111.32 km/degree scaled by cos(mean latitude),
    while deviation is measured on a 6371 km sphere. The margin is widened by the
    ratio of the two degree lengths and by cos(mean) / cos(poleward edge), then
    gets DEVIATION_MARGIN_SLACK on top.
    """
    margin = deviation_meters * METERS_PER_DEGREE / ARC_METERS_PER_DEGREE

    box = compute_route_bounding_box(route)
    if box is not None:
        mean_latitude = (box.min_latitude + box.max_latitude) / 2
        poleward_latitude = min(
            90.0,
            max(abs(box.min_latitude), abs(box.max_latitude)) + margin / METERS_PER_DEGREE,
        )
        poleward_scale = math.cos(math.radians(poleward_latitude))
        if poleward_scale < MIN_MERIDIAN_SCALE:
            # longitude span collapses near the pole: let the box cover every longitude
            return margin / MIN_MERIDIAN_SCALE
        margin *= math.cos(math.radians(mean_latitude)) / poleward_scale

    return margin * (1 + DEVIATION_MARGIN_SLACK)
