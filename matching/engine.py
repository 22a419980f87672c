"""
Purpose: The matching "orchestrator" (single entry point).
What it does:

Coordinates the pipeline end-to-end for ONE passenger:

- takes the published travels the persistence layer loaded

- filters them by eligibility (drivers/selection.py)

- prepares each route: anchors the driver's start/end, bounds its size (routing/route_service.py)

- rejects far-away travels with the bounding-box geofence (routing/geofence.py)

- evaluates the passenger insertion (insertion.py) and summarizes it (summary.py)

- ranks feasible travels and returns the best ones

Typical public function signature:

- find_matching_travels(stops, travels, options=..., policy=...) -> MatchResult

Rule: Engine is the only file other modules should call directly for matching.
"""

# matching/engine.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from drivers.models import Travel
from drivers.selection import filter_eligible_travels
from routing.errors import RoutingError
from routing.geofence import deviation_geofence_margin, passenger_within_geofence
from routing.models import Coordinate, ensure_coordinate
from routing.route_service import ensure_route_endpoints, prepare_route_for_evaluation, sanitize_route_waypoints

from .insertion import evaluate_passenger_insertion
from .models import MatchResult, PassengerStops, TravelMatch
from .policy import MatchingPolicy, RouteEvaluationOptions, default_matching_policy
from .summary import summarize_assignment_candidate

logger = logging.getLogger(__name__)


def find_matching_travels(
    passenger_stops: PassengerStops,
    travels: Sequence[Travel],
    *,
    options: RouteEvaluationOptions,
    policy: Optional[MatchingPolicy] = None,
    pickup_time: Optional[datetime] = None,
    passenger_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> MatchResult:
    """
    Rank the travels a passenger can be inserted into (pure algorithm).

    It does NOT reserve seats or touch storage. It only:
      - drops ineligible travels (status, seats, own travel, departure window)
      - evaluates the cheapest feasible insertion for each remaining travel
      - sorts by (additional minutes, additional km, price) and keeps policy.max_results

    Parameters
    ----------
    passenger_stops:
        Pickup/dropoff of the passenger.
    travels:
        Candidate travels, typically everything departing around pickup_time.
    options:
        Budgets for each insertion evaluation.
    policy:
        MatchingPolicy controlling eligibility window, route size bound, result cap.
    pickup_time:
        Requested pickup time; without it only travels that have not departed are used.
    passenger_id:
        Excludes travels driven by the same user.

    Returns
    -------
    MatchResult:
        matches: ranked TravelMatch list (at most policy.max_results)
        total_candidates: how many travels were feasible before the cap
    """
    policy = policy or default_matching_policy()
    policy.validate()
    options.validate()
    passenger_stops = PassengerStops(
        pickup=ensure_coordinate(passenger_stops.pickup),
        dropoff=ensure_coordinate(passenger_stops.dropoff),
    )

    eligible = filter_eligible_travels(
        travels,
        required_seats=policy.required_seats,
        pickup_time=pickup_time,
        time_window_minutes=policy.time_window_minutes,
        now=now,
        exclude_driver_id=passenger_id,
    )
    logger.debug("%d of %d travels eligible", len(eligible), len(travels))

    matches: List[TravelMatch] = []
    for travel in eligible:
        try:
            match = _evaluate_travel(travel, passenger_stops, options, policy)
        except RoutingError as exc:
            # malformed travel record: skip it, keep ranking the rest
            logger.warning("skipping travel %s: %s", travel.id, exc)
            continue

        if match is not None:
            matches.append(match)

    matches.sort(
        key=lambda match: (
            match.summary.additional_minutes,
            match.summary.additional_distance_km,
            match.price,
        )
    )

    logger.info(
        "passenger matched %d of %d eligible travels (returning %d)",
        len(matches), len(eligible), min(len(matches), policy.max_results),
    )

    return MatchResult(
        matches=matches[: policy.max_results],
        total_candidates=len(matches),
        applied_config={
            **options.as_dict(),
            "time_window_minutes": policy.time_window_minutes,
            "max_results": policy.max_results,
            "pickup_time": pickup_time.isoformat() if pickup_time else None,
        },
    )


def build_travel_route(travel: Travel) -> List[Coordinate]:
    """
    The route a travel actually drives: its stored waypoints (or nothing),
    anchored to the travel's start and end, without adjacent duplicates.
    """
    stored = [ensure_coordinate(point) for point in travel.route_waypoints]
    anchored = ensure_route_endpoints(stored, ensure_coordinate(travel.start), ensure_coordinate(travel.end))
    return sanitize_route_waypoints(anchored) or anchored


# -------------------------
# Internal helpers
# -------------------------

def _evaluate_travel(
    travel: Travel,
    passenger_stops: PassengerStops,
    options: RouteEvaluationOptions,
    policy: MatchingPolicy,
) -> Optional[TravelMatch]:
    route = prepare_route_for_evaluation(
        build_travel_route(travel),
        max_points=policy.max_route_points,
        tolerance_meters=policy.simplify_tolerance_meters,
    )

    geofence_margin = _geofence_margin(route, options, policy)
    if geofence_margin is not None and not passenger_within_geofence(
        route, passenger_stops.pickup, passenger_stops.dropoff, geofence_margin
    ):
        return None

    candidate = evaluate_passenger_insertion(route, passenger_stops, options)
    if candidate is None:
        return None

    return TravelMatch(
        travel_id=travel.id,
        driver_id=travel.driver_id,
        price=travel.price,
        start_time=travel.start_time,
        spaces_available=travel.spaces_available,
        candidate=candidate,
        summary=summarize_assignment_candidate(candidate),
    )


def _geofence_margin(
    route: List[Coordinate],
    options: RouteEvaluationOptions,
    policy: MatchingPolicy,
) -> Optional[float]:
    """
    Prefilter margin for this route. A deviation limit is widened so the box never
    drops a stop the insertion evaluator would accept; the policy margin is a raw
    box margin and is used as-is.
    """
    if options.max_deviation_meters is not None:
        return deviation_geofence_margin(route, options.max_deviation_meters)
    return policy.geofence_margin_meters
