#Purpose: ETA estimation policy.
#Converts a coordinate sequence into aggregate distance/duration (RouteMetrics)
#using straight-line (haversine) legs and a constant average speed.
#No traffic model: duration is distance / speed.

from __future__ import annotations

import math
from typing import Optional, Sequence

from .geometry import distance_km
from .models import Coordinate, RouteMetrics

DEFAULT_AVERAGE_SPEED_KMH = 30.0


def resolve_average_speed_kmh(average_speed_kmh: Optional[float]) -> float:
    """
    Speed actually used for duration estimates.
    Falls back to DEFAULT_AVERAGE_SPEED_KMH when absent, non-positive or non-finite.
    """
    if average_speed_kmh is None:
        return DEFAULT_AVERAGE_SPEED_KMH
    speed = float(average_speed_kmh)
    if not math.isfinite(speed) or speed <= 0:
        return DEFAULT_AVERAGE_SPEED_KMH
    return speed


def estimate_route_metrics(
    waypoints: Sequence[Coordinate],
    average_speed_kmh: Optional[float] = None,
) -> RouteMetrics:
    """
    Sum haversine legs over consecutive waypoints and convert to minutes.

    Routes with 0 or 1 points have zero distance and duration.
    Appending a point never decreases total_distance_km.
    """
    speed = resolve_average_speed_kmh(average_speed_kmh)

    total_distance_km = 0.0
    for current, following in zip(waypoints[:-1], waypoints[1:]):
        total_distance_km += distance_km(current, following)

    return RouteMetrics(
        total_distance_km=total_distance_km,
        total_duration_minutes=total_distance_km / speed * 60,
    )
