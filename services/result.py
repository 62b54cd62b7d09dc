"""
Result type returned across the team generation boundary.

Generation never raises for bad input; it returns either a complete, valid
partition or a structured failure.

Usage:
    # Returning success
    return GenerationResult.ok(teams, attempts_used=attempt, quality=vector)

    # Returning failure
    return GenerationResult.fail(
        "Team count must be between 2 and 10.",
        code=error_codes.TEAM_COUNT_OUT_OF_RANGE,
        suggestion="Choose a valid team count and try again.",
    )

    # Checking results
    if result:
        render(result.teams)
    else:
        print(f"{result.error} {result.suggestion}")
"""

from dataclasses import dataclass

from domain.models.allocation import QualityVector
from domain.models.member import Member
from services.error_codes import ERROR_KINDS


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one generate() call.

    Attributes:
        success: Whether a valid allocation was produced
        teams: One member list per team (None on failure)
        attempts_used: Attempt index of the returned allocation on success,
            attempts consumed on failure (0 when validation failed)
        quality: Quality vector of the returned allocation
        error: Fixed failure message
        error_code: Code from services.error_codes
        suggestion: What the caller can change to make generation succeed
    """

    success: bool
    teams: list[list[Member]] | None = None
    attempts_used: int = 0
    quality: QualityVector | None = None
    error: str | None = None
    error_code: str | None = None
    suggestion: str | None = None

    @classmethod
    def ok(
        cls,
        teams: list[list[Member]],
        attempts_used: int,
        quality: QualityVector | None = None,
    ) -> "GenerationResult":
        """Create a successful result."""
        return cls(success=True, teams=teams, attempts_used=attempts_used, quality=quality)

    @classmethod
    def fail(
        cls,
        error: str,
        code: str,
        suggestion: str,
        attempts_used: int = 0,
    ) -> "GenerationResult":
        """Create a failed result with message, code and suggestion."""
        return cls(
            success=False,
            error=error,
            error_code=code,
            suggestion=suggestion,
            attempts_used=attempts_used,
        )

    @property
    def error_kind(self) -> str | None:
        """Failure family (input, rule, structural, search) or None on success."""
        if self.success or self.error_code is None:
            return None
        return ERROR_KINDS.get(self.error_code)

    def __bool__(self) -> bool:
        """Allow using the result in boolean context: if result: ..."""
        return self.success

    def unwrap(self) -> list[list[Member]]:
        """
        Get the teams, raising ValueError if generation failed.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.teams  # type: ignore

    def unwrap_or(self, default: list[list[Member]]) -> list[list[Member]]:
        """Get the teams or a default if generation failed."""
        return self.teams if self.success else default  # type: ignore
