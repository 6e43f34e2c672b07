"""Tests for the high-level calculation API."""

import asyncio
import math

import pytest

from dice_core import (
    CalculationSession,
    CancellationToken,
    GoalComparison,
    GoalQuery,
    InvalidParameterError,
    RollMode,
    calculate,
    make_goal_query,
    validate_request,
)


class TestCalculate:
    """Tests for calculate."""

    def test_normal_roll_with_goal(self):
        """2d6 with a goal of 8 or higher."""
        result = calculate(2, 6, 0, RollMode.NORMAL, GoalQuery(8, GoalComparison.AT_LEAST))

        assert [row.outcome for row in result.results] == list(range(2, 13))
        assert result.modal_outcomes == {7}
        assert result.goal.percentage == 41.7
        assert result.goal.display_text == "8 or higher"
        assert result.compute_seconds >= 0.0

    def test_dice_label_is_accepted(self):
        """Sides may be given as a dice label."""
        result = calculate(1, "d20", 5)

        assert result.sides == 20
        assert min(result.pmf) == 6
        assert max(result.pmf) == 25

    def test_unknown_dice_label_raises(self):
        """Unparseable dice labels are invalid parameters."""
        with pytest.raises(InvalidParameterError):
            calculate(1, "coin")

    def test_advantage_goal_uses_transformed_distribution(self):
        """The goal is evaluated after the roll mode is applied."""
        result = calculate(1, 20, 0, "advantage", GoalQuery(20, GoalComparison.EXACTLY))

        assert result.roll_mode is RollMode.ADVANTAGE
        assert result.goal.probability == pytest.approx(39 / 400)
        assert math.fsum(result.pmf.values()) == pytest.approx(1.0)

    def test_invalid_goal_raises_before_work(self):
        """A malformed goal threshold is rejected up front."""
        with pytest.raises(InvalidParameterError):
            calculate(2, 6, 0, RollMode.NORMAL, GoalQuery(2.5, GoalComparison.EXACTLY))

    def test_unknown_goal_comparison_raises_before_work(self, countdown_token):
        """An unknown goal operator is rejected before the token is ever consulted."""
        token = countdown_token(limit=100)

        with pytest.raises(InvalidParameterError):
            calculate(10, 6, 0, RollMode.NORMAL, GoalQuery(8, "roughly"), cancel_token=token)

        assert token.checks == 0

    def test_goal_comparison_given_as_string(self):
        """A goal operator spelled as a string is parsed like the enum."""
        result = calculate(2, 6, 0, RollMode.NORMAL, GoalQuery(8, "orHigher"))

        assert result.goal.comparison is GoalComparison.AT_LEAST
        assert result.goal.probability == pytest.approx(15 / 36)

    def test_cancelled_request_returns_none(self):
        """A cancelled token yields no result."""
        token = CancellationToken(cancelled=True)

        assert calculate(5, 6, 0, cancel_token=token) is None

    def test_no_goal(self):
        """Without a goal the bundle has no goal answer."""
        assert calculate(3, 6).goal is None


class TestValidateRequest:
    """Tests for the calculator input bounds."""

    def test_accepts_bounds(self):
        """Edges of every range are valid."""
        validate_request(1, 2, -1000, GoalQuery(1))
        validate_request(100, 100, 1000, GoalQuery(10000))

    @pytest.mark.parametrize(
        "dice_count,sides,modifier,goal",
        [
            (101, 6, 0, None),
            (0, 6, 0, None),
            (1, 6, 1001, None),
            (1, 6, -1001, None),
            (1, 6, 0, GoalQuery(0)),
            (1, 6, 0, GoalQuery(10001)),
            (1, 6, 0, GoalQuery(5, "roughly")),
        ],
    )
    def test_rejects_out_of_range(self, dice_count, sides, modifier, goal):
        """Values outside the calculator ranges are rejected."""
        with pytest.raises(InvalidParameterError):
            validate_request(dice_count, sides, modifier, goal)


class TestMakeGoalQuery:
    """Tests for make_goal_query."""

    def test_no_goal_number(self):
        """An empty goal field means no query."""
        assert make_goal_query(None) is None

    def test_parses_comparison(self):
        """The comparison is normalised to the enum."""
        assert make_goal_query(12, "orLower") == GoalQuery(12, GoalComparison.AT_MOST)


class TestCalculationSession:
    """Tests for CalculationSession."""

    def test_new_request_cancels_previous_token(self):
        """Starting a request supersedes the one before it."""
        session = CalculationSession()
        previous = session.token

        result = session.calculate(2, 6)

        assert previous.cancelled
        assert not session.token.cancelled
        assert result is not None

    def test_cancel(self):
        """cancel flips the current token."""
        session = CalculationSession()

        session.cancel()

        assert session.token.cancelled

    def test_superseded_async_request_returns_none(self):
        """Only the latest of two overlapping async requests produces rows."""
        session = CalculationSession()

        async def scenario():
            return await asyncio.gather(
                session.calculate_async(30, 6),
                session.calculate_async(2, 6),
            )

        slow, fast = asyncio.run(scenario())

        assert slow is None
        assert [row.outcome for row in fast.results] == list(range(2, 13))

    def test_async_request_matches_sync_bundle(self):
        """The async path takes dice labels and goals like calculate does."""
        session = CalculationSession()
        goal = GoalQuery(8, GoalComparison.AT_LEAST)

        result = asyncio.run(session.calculate_async(2, "d6", 0, "advantage", goal))
        expected = calculate(2, 6, 0, RollMode.ADVANTAGE, goal)

        assert result.sides == 6
        assert result.roll_mode is RollMode.ADVANTAGE
        assert result.results == expected.results
        assert result.modal_outcomes == expected.modal_outcomes
        assert result.goal == expected.goal

    def test_async_invalid_goal_keeps_current_request(self):
        """A rejected async request does not supersede the one in flight."""
        session = CalculationSession()
        current = session.token

        with pytest.raises(InvalidParameterError):
            asyncio.run(session.calculate_async(2, 6, 0, "normal", GoalQuery(8, "roughly")))

        assert session.token is current
        assert not current.cancelled
