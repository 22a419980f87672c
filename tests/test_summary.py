import pytest

from matching.insertion import evaluate_passenger_insertion
from matching.models import AssignmentCandidate, PassengerStops
from matching.policy import RouteEvaluationOptions
from matching.summary import increase_percent, summarize_assignment_candidate
from routing.models import Coordinate, RouteMetrics


def _candidate(base, updated):
    return AssignmentCandidate(
        pickup_insert_index=1,
        dropoff_insert_index=2,
        additional_minutes=updated.total_duration_minutes - base.total_duration_minutes,
        additional_distance_km=updated.total_distance_km - base.total_distance_km,
        updated_route=(),
        updated_metrics=updated,
        base_metrics=base,
    )


def test_summary_projects_candidate():
    candidate = _candidate(RouteMetrics(10.0, 20.0), RouteMetrics(12.0, 24.0))

    summary = summarize_assignment_candidate(candidate)

    # 1. Indices and additional cost are carried over
    assert (summary.pickup_insert_index, summary.dropoff_insert_index) == (1, 2)
    assert summary.additional_distance_km == 2.0
    assert summary.additional_minutes == 4.0

    # 2. New totals come from the updated route
    assert summary.new_total_distance_km == 12.0
    assert summary.new_total_minutes == 24.0

    # 3. Percentages are relative to the base route
    assert summary.distance_increase_percent == pytest.approx(20.0)
    assert summary.time_increase_percent == pytest.approx(20.0)


def test_summary_to_dict():
    summary = summarize_assignment_candidate(_candidate(RouteMetrics(10.0, 20.0), RouteMetrics(12.0, 24.0)))

    assert summary.to_dict() == {
        "pickup_insert_index": 1,
        "dropoff_insert_index": 2,
        "additional_minutes": 4.0,
        "additional_distance_km": 2.0,
        "new_total_minutes": 24.0,
        "new_total_distance_km": 12.0,
        "time_increase_percent": pytest.approx(20.0),
        "distance_increase_percent": pytest.approx(20.0),
    }


@pytest.mark.parametrize(
    "additional, base, expected",
    [
        (5.0, 10.0, 50.0),
        (0.0, 10.0, 0.0),
        (0.0, 0.0, 0.0),
        (3.0, 0.0, None),
        (0.0, -1.0, 0.0),
    ],
)
def test_increase_percent(additional, base, expected):
    assert increase_percent(additional, base) == expected


def test_summary_of_insertion_into_empty_route():
    """
    An empty route has zero length, so any real passenger trip is an
    unbounded increase and has no percentage.
    """
    stops = PassengerStops(pickup=Coordinate(-17.82, 31.05), dropoff=Coordinate(-17.85, 31.08))
    candidate = evaluate_passenger_insertion([], stops, RouteEvaluationOptions(max_additional_minutes=999.0))

    summary = summarize_assignment_candidate(candidate)

    assert summary.distance_increase_percent is None
    assert summary.time_increase_percent is None
    assert summary.new_total_distance_km == pytest.approx(candidate.additional_distance_km)
