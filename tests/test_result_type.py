"""Tests for GenerationResult and error codes."""

import pytest

from domain.models.allocation import QualityVector
from domain.models.member import Member
from services import error_codes
from services.result import GenerationResult


def _teams():
    return [[Member("Eva")], [Member("Adam")]]


class TestGenerationResultOk:
    """Tests for successful result creation."""

    def test_ok_carries_teams_and_attempt(self):
        """GenerationResult.ok() stores teams, attempt index and quality."""
        quality = QualityVector(skill_sum_range=1)
        result = GenerationResult.ok(_teams(), attempts_used=3, quality=quality)
        assert result.success is True
        assert result.attempts_used == 3
        assert result.quality == quality
        assert result.error is None
        assert result.error_code is None
        assert result.suggestion is None

    def test_ok_has_no_error_kind(self):
        """Successful results have no failure family."""
        assert GenerationResult.ok(_teams(), attempts_used=1).error_kind is None


class TestGenerationResultFail:
    """Tests for failed result creation."""

    def test_fail_carries_message_code_and_suggestion(self):
        """fail() stores the fixed message, the code and the suggestion."""
        result = GenerationResult.fail(
            "No members are marked present.",
            code=error_codes.EMPTY_ROSTER,
            suggestion="Mark someone present.",
        )
        assert result.success is False
        assert result.teams is None
        assert result.error == "No members are marked present."
        assert result.error_code == error_codes.EMPTY_ROSTER
        assert result.suggestion == "Mark someone present."
        assert result.attempts_used == 0

    def test_fail_with_attempts(self):
        """Search failures report the attempts consumed."""
        result = GenerationResult.fail(
            "Could not build a valid split.",
            code=error_codes.NO_FEASIBLE_ALLOCATION,
            suggestion="Relax rules.",
            attempts_used=50,
        )
        assert result.attempts_used == 50

    @pytest.mark.parametrize(
        "code, kind",
        [
            (error_codes.DUPLICATE_IDENTITY, error_codes.KIND_INPUT),
            (error_codes.TEAM_COUNT_OUT_OF_RANGE, error_codes.KIND_INPUT),
            (error_codes.SELF_REFERENTIAL_RULE, error_codes.KIND_RULE),
            (error_codes.CONFLICTING_RULES, error_codes.KIND_RULE),
            (error_codes.OVERSIZED_GROUP, error_codes.KIND_STRUCTURAL),
            (error_codes.NO_FEASIBLE_ALLOCATION, error_codes.KIND_SEARCH),
            (error_codes.CANCELLED, error_codes.KIND_SEARCH),
        ],
    )
    def test_error_kind(self, code, kind):
        """Every code maps to one failure family."""
        result = GenerationResult.fail("x", code=code, suggestion="y")
        assert result.error_kind == kind


class TestGenerationResultBool:
    """Tests for boolean conversion."""

    def test_ok_is_truthy(self):
        assert GenerationResult.ok(_teams(), attempts_used=1)

    def test_fail_is_falsy(self):
        assert not GenerationResult.fail("x", code=error_codes.CANCELLED, suggestion="y")


class TestGenerationResultUnwrap:
    """Tests for unwrap and unwrap_or."""

    def test_unwrap_success(self):
        """unwrap() returns the teams on success."""
        teams = _teams()
        assert GenerationResult.ok(teams, attempts_used=1).unwrap() is teams

    def test_unwrap_failure_raises(self):
        """unwrap() raises ValueError with the error message."""
        result = GenerationResult.fail("Nope", code=error_codes.CANCELLED, suggestion="y")
        with pytest.raises(ValueError, match="Cannot unwrap failed result: Nope"):
            result.unwrap()

    def test_unwrap_or(self):
        """unwrap_or() falls back to the default on failure."""
        result = GenerationResult.fail("Nope", code=error_codes.CANCELLED, suggestion="y")
        assert result.unwrap_or([]) == []


class TestErrorCodes:
    """Tests for the error code table."""

    def test_every_code_has_a_kind(self):
        codes = [
            value
            for name, value in vars(error_codes).items()
            if name.isupper() and not name.startswith("KIND_") and isinstance(value, str)
        ]
        assert set(codes) == set(error_codes.ERROR_KINDS)

    def test_codes_are_unique(self):
        assert len(set(error_codes.ERROR_KINDS)) == len(error_codes.ERROR_KINDS)
