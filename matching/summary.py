# matching/summary.py

from __future__ import annotations

from typing import Optional

from .models import AssignmentCandidate, CandidateSummary


def summarize_assignment_candidate(candidate: AssignmentCandidate) -> CandidateSummary:
    """
    Project a candidate onto the numbers the request layer shows to users.

    Percent increase = additional / base * 100. A zero-length base route gives
    0.0 when nothing was added and None when something was (unbounded increase).
    """
    return CandidateSummary(
        pickup_insert_index=candidate.pickup_insert_index,
        dropoff_insert_index=candidate.dropoff_insert_index,
        additional_minutes=candidate.additional_minutes,
        additional_distance_km=candidate.additional_distance_km,
        new_total_minutes=candidate.updated_metrics.total_duration_minutes,
        new_total_distance_km=candidate.updated_metrics.total_distance_km,
        time_increase_percent=increase_percent(
            candidate.additional_minutes, candidate.base_metrics.total_duration_minutes
        ),
        distance_increase_percent=increase_percent(
            candidate.additional_distance_km, candidate.base_metrics.total_distance_km
        ),
    )


def increase_percent(additional: float, base: float) -> Optional[float]:
    if base <= 0:
        return 0.0 if additional == 0 else None
    return additional / base * 100
