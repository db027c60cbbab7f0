"""Tactical analysis over predicted trajectories."""

from .interception import (
    NO_INTERCEPTION,
    InterceptionAnalysis,
    PassEvaluation,
    analyze_interception,
    evaluate_pass_quality,
    find_optimal_intercept_point,
)

__all__ = [
    "NO_INTERCEPTION",
    "InterceptionAnalysis",
    "PassEvaluation",
    "analyze_interception",
    "evaluate_pass_quality",
    "find_optimal_intercept_point",
]
