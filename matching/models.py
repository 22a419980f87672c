"""
Purpose: Domain models for the Matching capability.
What it does:
- Defines core data structures:
- PassengerStops (pickup + dropoff of one candidate passenger)
- AssignmentCandidate (best feasible insertion of a passenger into a route)
- CandidateSummary (human-facing projection of a candidate)
- TravelMatch / MatchResult (a passenger ranked against many travels)

Rule: No geometry, no search logic. Models only.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from routing.models import Coordinate, RouteMetrics


@dataclass(frozen=True)
class PassengerStops:
    """
    Where one candidate passenger gets on and off.
    pickup == dropoff is allowed; it simply adds nothing at that break.
    """

    pickup: Coordinate
    dropoff: Coordinate


@dataclass(frozen=True)
class AssignmentCandidate:
    """
    Output of a successful insertion search.

    Both insert indices are positions in the ORIGINAL route: the updated route is
    route[:pickup] + [pickup] + route[pickup:dropoff] + [dropoff] + route[dropoff:].
    """

    pickup_insert_index: int
    dropoff_insert_index: int
    additional_minutes: float
    additional_distance_km: float
    updated_route: Tuple[Coordinate, ...]
    updated_metrics: RouteMetrics
    base_metrics: RouteMetrics

    # Diagnostics: pairs that passed the deviation masks and were actually costed
    explored_insertions: int = 0


@dataclass(frozen=True)
class CandidateSummary:
    """
    What the request layer shows to users for a candidate.

    Percent fields are None when the base route has zero length/duration but the
    insertion adds something (an unbounded increase).
    """

    pickup_insert_index: int
    dropoff_insert_index: int
    additional_minutes: float
    additional_distance_km: float
    new_total_minutes: float
    new_total_distance_km: float
    time_increase_percent: Optional[float]
    distance_increase_percent: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TravelMatch:
    """
    One travel the passenger fits into, with the evaluation that proves it.
    """

    travel_id: str
    driver_id: str
    price: float
    start_time: datetime
    spaces_available: int
    candidate: AssignmentCandidate
    summary: CandidateSummary


@dataclass(frozen=True)
class MatchResult:
    """
    Output of a matching run for one passenger.
    """

    matches: List[TravelMatch]
    total_candidates: int
    applied_config: Dict[str, Any] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.matches)
