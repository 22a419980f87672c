import pytest

from matching.policy import (
    MatchingPolicy,
    RouteEvaluationOptions,
    default_evaluation_options,
    default_matching_policy,
    matching_policy_from_env,
    options_from_env,
    strict_evaluation_options,
)

ENV_NAMES = [
    "RIDEMATCH_MAX_ADDITIONAL_MINUTES",
    "RIDEMATCH_AVERAGE_SPEED_KMH",
    "RIDEMATCH_MAX_DEVIATION_METERS",
    "RIDEMATCH_MAX_RESULTS",
    "RIDEMATCH_TIME_WINDOW_MINUTES",
    "RIDEMATCH_REQUIRED_SEATS",
    "RIDEMATCH_MAX_ROUTE_POINTS",
    "RIDEMATCH_SIMPLIFY_TOLERANCE_METERS",
    "RIDEMATCH_GEOFENCE_MARGIN_METERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_default_factories():
    options = default_evaluation_options()
    strict = strict_evaluation_options()
    policy = default_matching_policy()

    assert options == RouteEvaluationOptions(max_additional_minutes=5.0, average_speed_kmh=30.0)
    assert strict.max_additional_minutes < options.max_additional_minutes
    assert strict.max_deviation_meters == 500.0
    assert policy == MatchingPolicy()


def test_resolved_speed_and_as_dict():
    options = RouteEvaluationOptions(max_additional_minutes=4.0, average_speed_kmh=-3.0)

    assert options.resolved_average_speed_kmh == 30.0
    assert options.as_dict() == {
        "max_additional_minutes": 4.0,
        "average_speed_kmh": 30.0,
        "max_deviation_meters": None,
    }


@pytest.mark.parametrize(
    "options",
    [
        RouteEvaluationOptions(max_additional_minutes=float("nan")),
        RouteEvaluationOptions(max_additional_minutes=None),
        RouteEvaluationOptions(max_additional_minutes=5.0, max_deviation_meters=-1.0),
        RouteEvaluationOptions(max_additional_minutes=5.0, max_deviation_meters=float("nan")),
    ],
)
def test_invalid_evaluation_options(options):
    with pytest.raises(ValueError):
        options.validate()


def test_negative_budget_is_valid():
    # means "only free insertions"
    RouteEvaluationOptions(max_additional_minutes=-1.0).validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_results": 0},
        {"time_window_minutes": -1},
        {"required_seats": 0},
        {"max_route_points": 1},
        {"simplify_tolerance_meters": -0.5},
        {"geofence_margin_meters": -10.0},
    ],
)
def test_invalid_matching_policy(overrides):
    with pytest.raises(ValueError):
        MatchingPolicy(**overrides).validate()


def test_options_from_env_overrides(monkeypatch):
    monkeypatch.setenv("RIDEMATCH_MAX_ADDITIONAL_MINUTES", "8")
    monkeypatch.setenv("RIDEMATCH_MAX_DEVIATION_METERS", " 750 ")

    options = options_from_env()

    # 1. Overridden values are parsed
    assert options.max_additional_minutes == 8.0
    assert options.max_deviation_meters == 750.0

    # 2. Unset values keep the defaults
    assert options.average_speed_kmh == 30.0


def test_options_from_env_keeps_base(monkeypatch):
    monkeypatch.setenv("RIDEMATCH_AVERAGE_SPEED_KMH", "")

    assert options_from_env(strict_evaluation_options()) == strict_evaluation_options()


def test_matching_policy_from_env_overrides(monkeypatch):
    monkeypatch.setenv("RIDEMATCH_MAX_RESULTS", "3")
    monkeypatch.setenv("RIDEMATCH_REQUIRED_SEATS", "2")
    monkeypatch.setenv("RIDEMATCH_GEOFENCE_MARGIN_METERS", "2000")

    policy = matching_policy_from_env()

    assert policy.max_results == 3
    assert policy.required_seats == 2
    assert policy.geofence_margin_meters == 2000.0
    assert policy.time_window_minutes == 90


@pytest.mark.parametrize(
    "name, value",
    [
        ("RIDEMATCH_MAX_RESULTS", "ten"),
        ("RIDEMATCH_MAX_RESULTS", "0"),
        ("RIDEMATCH_MAX_ROUTE_POINTS", "2.5"),
    ],
)
def test_matching_policy_from_env_rejects_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        matching_policy_from_env()


def test_options_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("RIDEMATCH_MAX_ADDITIONAL_MINUTES", "a lot")

    with pytest.raises(ValueError, match="RIDEMATCH_MAX_ADDITIONAL_MINUTES"):
        options_from_env()
