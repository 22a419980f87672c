"""
Matching domain package.

Public API:
- Domain models: PassengerStops, AssignmentCandidate, CandidateSummary, TravelMatch, MatchResult
- Configuration: RouteEvaluationOptions, MatchingPolicy (+ factories)
- Core: evaluate_passenger_insertion, summarize_assignment_candidate
- Orchestrator: find_matching_travels
"""
from .engine import build_travel_route, find_matching_travels
from .insertion import evaluate_passenger_insertion, splice_passenger_stops
from .models import AssignmentCandidate, CandidateSummary, MatchResult, PassengerStops, TravelMatch
from .policy import (
    MatchingPolicy,
    RouteEvaluationOptions,
    default_evaluation_options,
    default_matching_policy,
    matching_policy_from_env,
    options_from_env,
    strict_evaluation_options,
)
from .summary import summarize_assignment_candidate

__all__ = [
    "PassengerStops",
    "AssignmentCandidate",
    "CandidateSummary",
    "TravelMatch",
    "MatchResult",
    "RouteEvaluationOptions",
    "MatchingPolicy",
    "default_evaluation_options",
    "strict_evaluation_options",
    "default_matching_policy",
    "options_from_env",
    "matching_policy_from_env",
    "evaluate_passenger_insertion",
    "splice_passenger_stops",
    "summarize_assignment_candidate",
    "find_matching_travels",
    "build_travel_route",
]
