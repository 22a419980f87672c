# matching/insertion.py

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Tuple

from routing.eta_service import estimate_route_metrics
from routing.geometry import distance_to_segment_m
from routing.models import Coordinate, ensure_coordinate

from .models import AssignmentCandidate, PassengerStops
from .policy import RouteEvaluationOptions

logger = logging.getLogger(__name__)

# added distance below this (km) is float noise from collinear splices, i.e. free
ZERO_COST_TOLERANCE_KM = 1e-9


def zero_cost_tolerance_minutes(speed_kmh: float) -> float:
    """ZERO_COST_TOLERANCE_KM expressed as driving minutes at speed_kmh."""
    return ZERO_COST_TOLERANCE_KM / speed_kmh * 60


def evaluate_passenger_insertion(
    route_waypoints: Sequence[Any],
    passenger_stops: PassengerStops,
    options: RouteEvaluationOptions,
) -> Optional[AssignmentCandidate]:
    """
    Find the cheapest way to splice a passenger's pickup and dropoff into a driver route.

    Tests every insertion pair (i, j) with 0 <= i <= j <= len(route), pickup always
    before dropoff. Both indices refer to the ORIGINAL route:

        route[:i] + [pickup] + route[i:j] + [dropoff] + route[j:]

    so i == j puts the dropoff right after the pickup at the same break.

    Feasibility:
      - additional minutes must not exceed options.max_additional_minutes
      - with options.max_deviation_meters set, the pickup must be within that distance
        of original segment [i-1, i] and the dropoff of segment [j-1, j]

    Selection: least additional distance, then least additional minutes, then the
    earliest (i, j).

    explored_insertions on the result counts the pairs that passed the deviation
    masks and were actually spliced and costed.

    Returns None when no insertion is feasible (an expected outcome, not an error).
    Raises InvalidCoordinate for unusable coordinates, ValueError for bad options.
    """
    options.validate()

    route: Tuple[Coordinate, ...] = tuple(ensure_coordinate(point) for point in route_waypoints)
    pickup = ensure_coordinate(passenger_stops.pickup)
    dropoff = ensure_coordinate(passenger_stops.dropoff)

    speed = options.resolved_average_speed_kmh
    # a negative budget behaves like 0: only free insertions pass
    budget_minutes = max(0.0, options.max_additional_minutes)
    base_metrics = estimate_route_metrics(route, speed)
    n = len(route)

    # Deviation of each stop at each break only depends on its own index,
    # so compute it once per index instead of once per pair.
    pickup_ok = _deviation_mask(route, pickup, options.max_deviation_meters)
    dropoff_ok = _deviation_mask(route, dropoff, options.max_deviation_meters)

    best: Optional[AssignmentCandidate] = None
    explored = 0

    for i in range(n + 1):
        if not pickup_ok[i]:
            continue

        for j in range(i, n + 1):
            if not dropoff_ok[j]:
                continue

            explored += 1
            updated_route = splice_passenger_stops(route, pickup, dropoff, i, j)
            updated_metrics = estimate_route_metrics(updated_route, speed)

            additional_distance_km = _added_cost(
                updated_metrics.total_distance_km, base_metrics.total_distance_km
            )
            additional_minutes = additional_distance_km / speed * 60

            if additional_minutes > budget_minutes:
                continue

            if best is not None and not _is_better(additional_distance_km, additional_minutes, best, speed):
                continue

            best = AssignmentCandidate(
                pickup_insert_index=i,
                dropoff_insert_index=j,
                additional_minutes=additional_minutes,
                additional_distance_km=additional_distance_km,
                updated_route=updated_route,
                updated_metrics=updated_metrics,
                base_metrics=base_metrics,
            )

    if best is None:
        logger.debug("no feasible insertion among %d pairs (route of %d points)", explored, n)
        return None

    logger.debug(
        "best insertion (%d, %d): +%.3f km, +%.2f min after %d pairs",
        best.pickup_insert_index, best.dropoff_insert_index,
        best.additional_distance_km, best.additional_minutes, explored,
    )

    return replace(best, explored_insertions=explored)


def splice_passenger_stops(
    route: Sequence[Coordinate],
    pickup: Coordinate,
    dropoff: Coordinate,
    pickup_index: int,
    dropoff_index: int,
) -> Tuple[Coordinate, ...]:
    """
    New route with pickup inserted before route[pickup_index] and dropoff before
    route[dropoff_index], both indices taken against the original route.
    """
    if not 0 <= pickup_index <= dropoff_index <= len(route):
        raise ValueError(
            f"invalid insertion pair ({pickup_index}, {dropoff_index}) for a route of {len(route)} points"
        )

    return (
        tuple(route[:pickup_index])
        + (pickup,)
        + tuple(route[pickup_index:dropoff_index])
        + (dropoff,)
        + tuple(route[dropoff_index:])
    )


# -------------------------
# Internal helpers
# -------------------------

def _deviation_mask(
    route: Sequence[Coordinate],
    stop: Coordinate,
    max_deviation_meters: Optional[float],
) -> List[bool]:
    """
    For every break index k in 0..len(route), whether `stop` is close enough to the
    original segment [k-1, k]. At the route ends the segment collapses to the end point.
    Without a budget (or without any segment to measure against) every break is allowed.
    """
    n = len(route)
    if max_deviation_meters is None or n == 0:
        return [True] * (n + 1)

    mask: List[bool] = []
    for k in range(n + 1):
        start = route[max(k - 1, 0)]
        end = route[min(k, n - 1)]
        mask.append(distance_to_segment_m(stop, start, end) <= max_deviation_meters)
    return mask


def _added_cost(updated_km: float, base_km: float) -> float:
    added = updated_km - base_km
    if abs(added) < ZERO_COST_TOLERANCE_KM:
        return 0.0
    return max(0.0, added)


def _is_better(distance_km: float, minutes: float, best: AssignmentCandidate, speed_kmh: float) -> bool:
    """
    Strictly better than the current best. Near-equal costs count as ties so the
    earlier (i, j) seen first keeps winning.
    """
    if distance_km < best.additional_distance_km - ZERO_COST_TOLERANCE_KM:
        return True
    if distance_km > best.additional_distance_km + ZERO_COST_TOLERANCE_KM:
        return False
    return minutes < best.additional_minutes - zero_cost_tolerance_minutes(speed_kmh)
