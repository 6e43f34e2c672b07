"""Streamlit front-end for the dice probability calculator."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st
from pandas.io.formats.style import Styler

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dice_core import (
    DICE_COUNT_OPTIONS,
    DICE_OPTIONS,
    GOAL_COMPARISON_OPTIONS,
    MAX_GOAL_NUMBER,
    MAX_MODIFIER,
    MIN_GOAL_NUMBER,
    MIN_MODIFIER,
    ROLL_MODE_OPTIONS,
    CalculationResult,
    CalculationSession,
    GoalComparison,
    GoalQuery,
    GoalResult,
    InvalidParameterError,
    RollMode,
    format_percentage,
    make_goal_query,
    results_to_frame,
    roll_mode_suffix,
    validate_request,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "Select a die"
DICE_LABELS = {option.value: option.label for option in DICE_OPTIONS}
DICE_SIDES = {option.value: option.sides for option in DICE_OPTIONS}


def ensure_session_state_defaults() -> None:
    """Populate Streamlit session state with expected default entries."""

    st.session_state.setdefault("dice_count", 1)
    st.session_state.setdefault("dice_type", PLACEHOLDER)
    st.session_state.setdefault("modifier", 0)
    st.session_state.setdefault("roll_mode", RollMode.NORMAL)
    st.session_state.setdefault("goal_number", None)
    st.session_state.setdefault("goal_comparison", GoalComparison.AT_LEAST)
    st.session_state.setdefault("calculation_result", None)
    st.session_state.setdefault("calculation_error", None)
    if "calculation_session" not in st.session_state:
        st.session_state.calculation_session = CalculationSession()


def render_dice_inputs() -> None:
    """Render dice count, dice type, modifier and roll mode controls."""

    with st.container(border=True):
        st.markdown('<div class="card-title">Roll</div>', unsafe_allow_html=True)
        count_col, type_col, mod_col = st.columns([1.0, 1.4, 1.0])
        count_col.selectbox("Number of dice", options=DICE_COUNT_OPTIONS, key="dice_count")
        type_col.selectbox(
            "Dice type",
            options=[PLACEHOLDER] + list(DICE_LABELS),
            key="dice_type",
            format_func=lambda value: DICE_LABELS.get(value, value),
        )
        mod_col.number_input(
            "Modifier",
            min_value=MIN_MODIFIER,
            max_value=MAX_MODIFIER,
            step=1,
            key="modifier",
        )
        st.radio(
            "Roll mode",
            options=list(ROLL_MODE_OPTIONS),
            key="roll_mode",
            format_func=lambda mode: ROLL_MODE_OPTIONS[mode],
            horizontal=True,
        )


def render_goal_inputs() -> None:
    """Render the optional goal number and its comparison."""

    with st.container(border=True):
        st.markdown('<div class="card-title">Goal</div>', unsafe_allow_html=True)
        goal_col, comparison_col = st.columns([1.0, 1.4])
        goal_col.number_input(
            "Goal number",
            min_value=MIN_GOAL_NUMBER,
            max_value=MAX_GOAL_NUMBER,
            step=1,
            key="goal_number",
            placeholder="Optional",
        )
        comparison_col.selectbox(
            "Comparison",
            options=list(GOAL_COMPARISON_OPTIONS),
            key="goal_comparison",
            format_func=lambda comparison: GOAL_COMPARISON_OPTIONS[comparison],
        )


def current_goal() -> Optional[GoalQuery]:
    """Return the goal query for the current inputs, if a goal was entered."""

    goal_number = st.session_state.goal_number
    if goal_number is None:
        return None
    return make_goal_query(int(goal_number), st.session_state.goal_comparison)


def run_calculation() -> None:
    """Compute the distribution for the current inputs and store it in session state."""

    st.session_state.calculation_error = None
    st.session_state.calculation_result = None
    dice_type = st.session_state.dice_type
    if dice_type == PLACEHOLDER:
        return

    session: CalculationSession = st.session_state.calculation_session
    try:
        goal = current_goal()
        sides = DICE_SIDES[dice_type]
        dice_count = int(st.session_state.dice_count)
        modifier = int(st.session_state.modifier)
        validate_request(dice_count, sides, modifier, goal)
        with st.spinner("Calculating distribution…"):
            result = session.calculate(
                dice_count,
                sides,
                modifier,
                st.session_state.roll_mode,
                goal,
            )
    except InvalidParameterError as exc:
        logger.warning("Rejected calculator input: %s", exc)
        st.session_state.calculation_error = str(exc)
        return
    st.session_state.calculation_result = result


def render_goal_result(goal: GoalResult) -> None:
    """Show the probability of reaching the goal."""

    with st.container(border=True):
        label = format_percentage(goal.probability, goal.percentage)
        st.metric(
            f"Chance of {goal.display_text}{roll_mode_suffix(goal.roll_mode)}",
            f"{label}%",
        )


def style_table(frame: pd.DataFrame) -> Styler:
    """Bold modal outcomes and shade rows that meet the goal."""

    def row_style(row: pd.Series) -> list[str]:
        styles = []
        if row["is_mode"]:
            styles.append("font-weight: 700")
        if row["meets_goal"]:
            styles.append("background-color: #e0e7ff")
        return ["; ".join(styles)] * len(row)

    return frame.style.apply(row_style, axis=1).hide(
        axis="columns", subset=["probability", "percentage", "is_mode", "meets_goal"]
    )


def render_distribution(result: CalculationResult, goal: Optional[GoalQuery]) -> None:
    """Render the probability table for the latest calculation."""

    with st.container(border=True):
        st.markdown('<div class="card-title">Distribution</div>', unsafe_allow_html=True)
        frame = results_to_frame(result.results, goal)
        frame = frame.rename(columns={"display": "chance (%)"})
        st.dataframe(style_table(frame), hide_index=True, use_container_width=True)
        st.caption(
            f"{len(result.results)} outcomes, rows under 0.1% hidden. "
            f"Computed in {result.compute_seconds:.3f} s."
        )


def apply_page_styling() -> None:
    """Inject CSS tweaks that style the Streamlit app."""

    st.set_page_config(page_title="Dice Probability Calculator", layout="centered")
    st.markdown(
        """
        <style>
        div[data-testid="stVerticalBlockBorderWrapper"] {
            border: 1px solid #e3e6eb;
            border-radius: 12px;
            padding: 1.25rem;
            background-color: #ffffff;
            box-shadow: 0 4px 10px rgba(15, 23, 42, 0.06);
            margin-bottom: 1.25rem;
        }
        .card-title {
            font-size: 1.1rem;
            font-weight: 600;
            margin-bottom: 0.8rem;
        }
        div[data-testid="stMetricValue"] {
            font-size: 1.8rem;
            font-weight: 600;
            color: #0f172a;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def main() -> None:
    """Entry point used by Streamlit."""

    logging.basicConfig(level=logging.INFO)
    apply_page_styling()
    ensure_session_state_defaults()

    st.title("Dice Probability Calculator")
    render_dice_inputs()
    render_goal_inputs()
    run_calculation()

    if st.session_state.calculation_error:
        st.error(f"Invalid input: {st.session_state.calculation_error}")
        return

    result = st.session_state.calculation_result
    if not isinstance(result, CalculationResult):
        st.caption("Choose a dice type to see the distribution.")
        return

    if result.goal is not None:
        render_goal_result(result.goal)
    render_distribution(result, current_goal())


if __name__ == "__main__":
    main()
