"""
Purpose: Central configuration for passenger matching (single source of truth).
What it does:

Stores all tunable thresholds/caps:

MAX_ADDITIONAL_MINUTES = 5     (hard time budget per inserted passenger)

AVERAGE_SPEED_KMH = 30         (distance -> duration)

MAX_DEVIATION_METERS = None    (optional lateral budget)

MAX_RESULTS = 10, TIME_WINDOW_MINUTES = 90, MAX_ROUTE_POINTS = 200

Defines RouteEvaluationOptions (one insertion evaluation) and MatchingPolicy
(one passenger against many travels), plus factories that read overrides from
the environment / .env file.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

from routing.eta_service import resolve_average_speed_kmh

# Read overrides from the environment
# Example in .env:
# RIDEMATCH_MAX_ADDITIONAL_MINUTES=8
# RIDEMATCH_MAX_DEVIATION_METERS=750
load_dotenv()

ENV_PREFIX = "RIDEMATCH_"


@dataclass(frozen=True)
class RouteEvaluationOptions:
    """
    Budgets for inserting ONE passenger into ONE driver route.

    Notes:
    - average_speed_kmh converts distance to duration; None / <= 0 means 30 km/h.
    - max_additional_minutes is the hard feasibility ceiling. <= 0 means only an
      insertion that costs nothing at all is feasible.
    - max_deviation_meters, when set, caps how far each inserted stop may be from
      the original route segment it is spliced into.
    """

    max_additional_minutes: float
    average_speed_kmh: Optional[float] = None
    max_deviation_meters: Optional[float] = None

    @property
    def resolved_average_speed_kmh(self) -> float:
        return resolve_average_speed_kmh(self.average_speed_kmh)

    def validate(self) -> None:
        """
        Basic sanity checks. The evaluator calls this on every run.
        """
        if self.max_additional_minutes is None or math.isnan(self.max_additional_minutes):
            raise ValueError("max_additional_minutes must be a number")

        if self.max_deviation_meters is not None:
            if math.isnan(self.max_deviation_meters):
                raise ValueError("max_deviation_meters must be a number")
            if self.max_deviation_meters < 0:
                raise ValueError("max_deviation_meters must be >= 0")

    def as_dict(self) -> Dict[str, Any]:
        applied = asdict(self)
        applied["average_speed_kmh"] = self.resolved_average_speed_kmh
        return applied


@dataclass(frozen=True)
class MatchingPolicy:
    """
    Central configuration for ranking one passenger against many travels.
    """

    # --- Result caps ---
    max_results: int = 10

    # --- Eligibility ---
    # Travels must start within +/- this many minutes of the requested pickup time.
    time_window_minutes: int = 90
    required_seats: int = 1

    # --- Search-space control (performance) ---
    # Routes longer than this are simplified before the O(n^2) insertion search.
    max_route_points: int = 200
    simplify_tolerance_meters: float = 15.0

    # --- Geofence prefilter ---
    # Margin used when the evaluation has no max_deviation_meters.
    # None disables the prefilter in that case.
    geofence_margin_meters: Optional[float] = None

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.max_results < 1:
            raise ValueError("max_results must be >= 1")

        if self.time_window_minutes < 0:
            raise ValueError("time_window_minutes must be >= 0")

        if self.required_seats < 1:
            raise ValueError("required_seats must be >= 1")

        if self.max_route_points < 2:
            raise ValueError("max_route_points must be >= 2")

        if self.simplify_tolerance_meters < 0:
            raise ValueError("simplify_tolerance_meters must be >= 0")

        if self.geofence_margin_meters is not None and self.geofence_margin_meters < 0:
            raise ValueError("geofence_margin_meters must be >= 0")


def default_evaluation_options() -> RouteEvaluationOptions:
    """
    Convenience factory: 5 extra minutes at 30 km/h, no deviation limit.
    """
    options = RouteEvaluationOptions(max_additional_minutes=5.0, average_speed_kmh=30.0)
    options.validate()
    return options


def strict_evaluation_options() -> RouteEvaluationOptions:
    """
    Example: tighter budgets for peak hours, protects drivers' ETAs.
    """
    options = RouteEvaluationOptions(
        max_additional_minutes=3.0,
        average_speed_kmh=25.0,
        max_deviation_meters=500.0,
    )
    options.validate()
    return options


def default_matching_policy() -> MatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    policy = MatchingPolicy()
    policy.validate()
    return policy


def options_from_env(base: Optional[RouteEvaluationOptions] = None) -> RouteEvaluationOptions:
    """
    Evaluation options with RIDEMATCH_* environment overrides applied on top of `base`.
    Unset variables keep the base value; unparseable values raise ValueError.
    """
    base = base or default_evaluation_options()
    options = RouteEvaluationOptions(
        max_additional_minutes=_env("MAX_ADDITIONAL_MINUTES", float, base.max_additional_minutes),
        average_speed_kmh=_env("AVERAGE_SPEED_KMH", float, base.average_speed_kmh),
        max_deviation_meters=_env("MAX_DEVIATION_METERS", float, base.max_deviation_meters),
    )
    options.validate()
    return options


def matching_policy_from_env(base: Optional[MatchingPolicy] = None) -> MatchingPolicy:
    """
    Matching policy with RIDEMATCH_* environment overrides applied on top of `base`.
    """
    base = base or default_matching_policy()
    policy = MatchingPolicy(
        max_results=_env("MAX_RESULTS", int, base.max_results),
        time_window_minutes=_env("TIME_WINDOW_MINUTES", int, base.time_window_minutes),
        required_seats=_env("REQUIRED_SEATS", int, base.required_seats),
        max_route_points=_env("MAX_ROUTE_POINTS", int, base.max_route_points),
        simplify_tolerance_meters=_env("SIMPLIFY_TOLERANCE_METERS", float, base.simplify_tolerance_meters),
        geofence_margin_meters=_env("GEOFENCE_MARGIN_METERS", float, base.geofence_margin_meters),
    )
    policy.validate()
    return policy


def _env(name: str, parse: Callable[[str], Any], default: Any) -> Any:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX + name} has an invalid value: {raw!r}") from exc
