"""Exact probability engine for sums of identical dice."""

from __future__ import annotations

from .api import CalculationSession, calculate, make_goal_query, validate_request
from .data import (
    DICE_COUNT_OPTIONS,
    DICE_OPTIONS,
    DISPLAY_THRESHOLD,
    GOAL_COMPARISON_OPTIONS,
    MAX_DICE_COUNT,
    MAX_GOAL_NUMBER,
    MAX_MODIFIER,
    MIN_GOAL_NUMBER,
    MIN_MODIFIER,
    ROLL_MODE_OPTIONS,
    ProbabilityMassFunction,
    get_yield_interval,
    parse_dice_type,
    set_yield_interval,
)
from .distribution import (
    build_distribution,
    build_results,
    calculate_distribution,
    convolve_die,
    iter_convolution,
    shift_pmf,
    single_die_pmf,
    to_results,
)
from .exceptions import CalculationCancelled, DiceCalculatorError, InvalidParameterError
from .goal import (
    compute_goal_result,
    goal_display_text,
    goal_matches,
    goal_probability,
    parse_goal_comparison,
    roll_mode_suffix,
)
from .models import (
    CalculationResult,
    CancellationToken,
    DiceOption,
    GoalComparison,
    GoalQuery,
    GoalResult,
    ProbabilityResult,
    RollMode,
)
from .presentation import format_percentage, modal_outcomes, round_half_up, round_percentage
from .roll_mode import apply_roll_mode, parse_roll_mode
from .table import highlighted_outcomes, results_to_frame, sort_results, visible_results

__all__ = [
    "CalculationCancelled",
    "CalculationResult",
    "CalculationSession",
    "CancellationToken",
    "DICE_COUNT_OPTIONS",
    "DICE_OPTIONS",
    "DISPLAY_THRESHOLD",
    "DiceCalculatorError",
    "DiceOption",
    "GOAL_COMPARISON_OPTIONS",
    "GoalComparison",
    "GoalQuery",
    "GoalResult",
    "InvalidParameterError",
    "MAX_DICE_COUNT",
    "MAX_GOAL_NUMBER",
    "MAX_MODIFIER",
    "MIN_GOAL_NUMBER",
    "MIN_MODIFIER",
    "ProbabilityMassFunction",
    "ProbabilityResult",
    "ROLL_MODE_OPTIONS",
    "RollMode",
    "apply_roll_mode",
    "build_distribution",
    "build_results",
    "calculate",
    "calculate_distribution",
    "compute_goal_result",
    "convolve_die",
    "format_percentage",
    "get_yield_interval",
    "goal_display_text",
    "goal_matches",
    "goal_probability",
    "highlighted_outcomes",
    "iter_convolution",
    "make_goal_query",
    "modal_outcomes",
    "parse_dice_type",
    "parse_goal_comparison",
    "parse_roll_mode",
    "results_to_frame",
    "roll_mode_suffix",
    "round_half_up",
    "round_percentage",
    "set_yield_interval",
    "shift_pmf",
    "single_die_pmf",
    "sort_results",
    "to_results",
    "validate_request",
    "visible_results",
]
