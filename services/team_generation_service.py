"""
Team generation service.

Validates a roster snapshot, builds the constraint structures, and runs the
randomized attempt loop, keeping the best allocation found.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum

from config import MAX_TEAM_COUNT, MIN_TEAM_COUNT, TEAM_GENERATOR_SEED, TEAM_MAX_ATTEMPTS
from domain.models.allocation import AtomicGroup, TargetDistribution
from domain.models.member import Member, PairRule
from domain.services.constraint_graph import (
    ConstraintGraphBuilder,
    GroupConflictProjection,
    form_atomic_groups,
    project_group_conflicts,
)
from domain.services.quality_evaluator import PERFECT_RANK, AllocationRank, QualityEvaluator
from domain.services.roster_normalizer import NormalizedRoster, normalize_roster
from domain.services.rule_validator import RuleValidation, RuleValidator
from domain.services.target_distribution import calculate_target_distribution
from services import error_codes
from services.interfaces import IRosterSource, ITeamGenerationService
from services.result import GenerationResult
from shuffler import TeamShuffler
from utils.debug_logging import debug_log
from utils.formatting import format_quality

logger = logging.getLogger("team_builder.services.team_generation")


class GenerationPhase(Enum):
    """States a generate() call moves through."""

    VALIDATING = "validating"
    BUILDING = "building"
    CHECKING = "checking"
    ATTEMPT_LOOP = "attempt_loop"
    DONE = "done"


@dataclass
class AllocationPlan:
    """Everything the attempt loop needs, built once per call."""

    groups: list[AtomicGroup]
    projection: GroupConflictProjection
    targets: TargetDistribution


def _names(rules: list[PairRule]) -> str:
    return ", ".join(str(rule) for rule in rules)


class TeamGenerationService(ITeamGenerationService):
    """
    Orchestrates one team generation request.

    The service holds configuration only; every call builds its own state from
    the snapshot it is given and discards it afterwards.
    """

    def __init__(
        self,
        shuffler: TeamShuffler | None = None,
        min_team_count: int | None = None,
        max_team_count: int | None = None,
        default_max_attempts: int | None = None,
    ):
        self.shuffler = shuffler or TeamShuffler()
        self.min_team_count = min_team_count if min_team_count is not None else MIN_TEAM_COUNT
        self.max_team_count = max_team_count if max_team_count is not None else MAX_TEAM_COUNT
        self.default_max_attempts = (
            default_max_attempts if default_max_attempts is not None else TEAM_MAX_ATTEMPTS
        )

    @staticmethod
    def _enter(phase: GenerationPhase) -> None:
        logger.debug(f"Phase: {phase.value}")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_roster(self, roster: NormalizedRoster, team_count: int) -> GenerationResult | None:
        if roster.duplicates:
            return GenerationResult.fail(
                f"Duplicate member names found: {', '.join(roster.duplicates)}.",
                code=error_codes.DUPLICATE_IDENTITY,
                suggestion="Remove or rename the duplicates in the roster and try again.",
            )

        if roster.invalid_members:
            names = ", ".join(f"{m.name} ({m.level})" for m in roster.invalid_members)
            return GenerationResult.fail(
                f"Members with a level outside 1-3: {names}.",
                code=error_codes.INVALID_MEMBER,
                suggestion="Set every member's level to 1, 2 or 3 and try again.",
            )

        present_count = len(roster.present)
        if present_count == 0:
            return GenerationResult.fail(
                "No members are marked present.",
                code=error_codes.EMPTY_ROSTER,
                suggestion="Add members or mark at least one as present before generating teams.",
            )

        if team_count < self.min_team_count or team_count > self.max_team_count:
            return GenerationResult.fail(
                f"Team count must be between {self.min_team_count} and {self.max_team_count}.",
                code=error_codes.TEAM_COUNT_OUT_OF_RANGE,
                suggestion="Choose a valid team count and try again.",
            )

        if team_count > present_count:
            return GenerationResult.fail(
                f"Team count ({team_count}) is larger than the number of present members "
                f"({present_count}).",
                code=error_codes.TEAM_COUNT_EXCEEDS_PRESENT,
                suggestion="Reduce the team count or mark more members as present.",
            )

        return None

    def _validate_rules(
        self,
        exclusion: RuleValidation,
        cohesion: RuleValidation,
    ) -> GenerationResult | None:
        self_referential = exclusion.self_referential + cohesion.self_referential
        if self_referential:
            return GenerationResult.fail(
                f"Rules with the same member on both sides: {_names(self_referential)}.",
                code=error_codes.SELF_REFERENTIAL_RULE,
                suggestion="Remove the invalid rules and try again.",
            )

        dangling = exclusion.dangling + cohesion.dangling
        if dangling:
            return GenerationResult.fail(
                f"Rules reference members who are not on the roster: {_names(dangling)}.",
                code=error_codes.UNKNOWN_IDENTITY_RULE,
                suggestion="Clean up rules for removed members and try again.",
            )

        return None

    def _check_structure(
        self,
        projection: GroupConflictProjection,
        targets: TargetDistribution,
    ) -> GenerationResult | None:
        if projection.internal_conflicts:
            pairs = ", ".join(f"{a} / {b}" for a, b in projection.internal_conflicts)
            return GenerationResult.fail(
                f"Rules contradict each other: {pairs} must be kept apart but are also "
                "required to be together.",
                code=error_codes.CONFLICTING_RULES,
                suggestion="Remove either the keep-apart or the keep-together rule for these members.",
            )

        if projection.oversized_groups:
            largest = max(projection.oversized_groups, key=lambda g: g.size)
            names = ", ".join(m.name for m in largest.members)
            return GenerationResult.fail(
                f"{largest.size} members must be together ({names}), but the largest team "
                f"holds {targets.max_team_size}.",
                code=error_codes.OVERSIZED_GROUP,
                suggestion="Reduce the team count or relax the keep-together rules.",
            )

        return None

    def prepare(
        self,
        members: list[Member],
        exclusion_rules: list[PairRule],
        cohesion_rules: list[PairRule],
        team_count: int,
    ) -> AllocationPlan | GenerationResult:
        """
        Run every precondition and build the per-call allocation plan.

        Returns:
            AllocationPlan when generation can start, otherwise a failed
            GenerationResult with attempts_used=0
        """
        self._enter(GenerationPhase.VALIDATING)
        roster = normalize_roster(members)
        failure = self._validate_roster(roster, team_count)
        if failure is not None:
            return failure

        validator = RuleValidator(roster.keys, roster.present_keys)
        exclusion = validator.validate(exclusion_rules)
        cohesion = validator.validate(cohesion_rules)
        failure = self._validate_rules(exclusion, cohesion)
        if failure is not None:
            return failure
        ignored = len(exclusion.inactive) + len(cohesion.inactive)
        if ignored:
            logger.info(f"Ignoring {ignored} rule(s) that involve absent members")

        self._enter(GenerationPhase.BUILDING)
        present = roster.present
        graphs = ConstraintGraphBuilder(m.key for m in present).build(
            exclusion.active_pairs, cohesion.active_pairs
        )
        groups = form_atomic_groups(present, graphs.cohesion)
        targets = calculate_target_distribution(present, team_count)
        projection = project_group_conflicts(groups, graphs.exclusion, targets.max_team_size)

        self._enter(GenerationPhase.CHECKING)
        failure = self._check_structure(projection, targets)
        if failure is not None:
            return failure

        logger.debug(
            f"Plan ready: {len(present)} present members, "
            f"{len(groups)} groups, team sizes {targets.team_sizes}"
        )
        return AllocationPlan(groups=groups, projection=projection, targets=targets)

    # ------------------------------------------------------------------
    # Attempt loop
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_rng(seed: int | None, rng: random.Random | None) -> random.Random:
        if rng is not None:
            return rng
        if seed is not None:
            return random.Random(seed)
        if TEAM_GENERATOR_SEED is not None:
            return random.Random(TEAM_GENERATOR_SEED)
        return random.Random()

    def generate(
        self,
        members: list[Member],
        exclusion_rules: list[PairRule],
        cohesion_rules: list[PairRule],
        team_count: int,
        max_attempts: int | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        cancel_event: threading.Event | None = None,
    ) -> GenerationResult:
        """
        Partition present members into team_count balanced teams.

        Args:
            members: Roster snapshot (absent members are ignored)
            exclusion_rules: Pairs that must not share a team
            cohesion_rules: Pairs that must share a team
            team_count: Number of teams to build
            max_attempts: Attempt budget (default TEAM_MAX_ATTEMPTS, minimum 1)
            seed: Seed for a fresh generator (ignored when rng is given)
            rng: Generator to draw all randomness from
            cancel_event: Checked before every attempt; when set, the best
                allocation so far is returned (or a cancelled failure)

        Returns:
            GenerationResult; never raises for invalid input
        """
        plan = self.prepare(members, exclusion_rules, cohesion_rules, team_count)
        if isinstance(plan, GenerationResult):
            logger.info(f"Team generation rejected ({plan.error_code}): {plan.error}")
            debug_log("rejected", "team_generation_service.generate", {"code": plan.error_code})
            return plan

        budget = self.default_max_attempts if max_attempts is None else max_attempts
        attempt_limit = max(1, budget)
        result = self._run_attempts(plan, attempt_limit, self._resolve_rng(seed, rng), cancel_event)

        debug_log(
            "completed" if result else "failed",
            "team_generation_service.generate",
            {
                "code": result.error_code,
                "attempts": result.attempts_used,
                "quality": result.quality.as_tuple() if result.quality else None,
                "team_count": team_count,
            },
        )
        return result

    def _run_attempts(
        self,
        plan: AllocationPlan,
        attempt_limit: int,
        rng: random.Random,
        cancel_event: threading.Event | None,
    ) -> GenerationResult:
        evaluator = QualityEvaluator(plan.targets)
        best_teams: list[list[Member]] | None = None
        best_rank: AllocationRank | None = None
        best_attempt = 0
        infeasible = 0
        attempts_run = 0
        cancelled = False

        self._enter(GenerationPhase.ATTEMPT_LOOP)
        logger.info(
            f"Generating {plan.targets.team_count} teams from {len(plan.groups)} groups "
            f"(up to {attempt_limit} attempts)"
        )

        for attempt in range(1, attempt_limit + 1):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Generation cancelled before attempt {attempt}")
                cancelled = True
                break
            attempts_run = attempt

            teams = self.shuffler.build_allocation(plan.groups, plan.targets, plan.projection, rng)
            if teams is None:
                infeasible += 1
                continue

            refined = self.shuffler.refine(teams, evaluator, plan.projection.group_conflicts)
            if evaluator.is_better(refined.rank, best_rank):
                best_rank = refined.rank
                best_teams = [team.members for team in refined.teams]
                best_attempt = attempt
                logger.info(
                    f"Attempt {attempt}: new best (size deviation={refined.size_deviation}, "
                    f"{format_quality(refined.quality)})"
                )

                if best_rank == PERFECT_RANK:
                    logger.info("Early termination: perfect balance found")
                    break

        self._enter(GenerationPhase.DONE)
        if best_teams is not None:
            logger.info(
                f"Generation done: best from attempt {best_attempt} of {attempts_run} "
                f"({infeasible} infeasible)"
            )
            return GenerationResult.ok(best_teams, attempts_used=best_attempt, quality=best_rank[1])

        if cancelled:
            return GenerationResult.fail(
                "Generation was cancelled before a valid split was found.",
                code=error_codes.CANCELLED,
                suggestion="Allow more time or try again.",
                attempts_used=attempts_run,
            )

        logger.info(f"No feasible allocation in {attempt_limit} attempts")
        return GenerationResult.fail(
            "Could not build a valid split with the current rules.",
            code=error_codes.NO_FEASIBLE_ALLOCATION,
            suggestion="Change the team count or relax the keep-apart rules, then try again.",
            attempts_used=attempt_limit,
        )

    def generate_from_source(
        self,
        source: IRosterSource,
        team_count: int,
        max_attempts: int | None = None,
        *,
        seed: int | None = None,
    ) -> GenerationResult:
        return self.generate(
            source.load_members(),
            source.load_exclusion_rules(),
            source.load_cohesion_rules(),
            team_count,
            max_attempts,
            seed=seed,
        )


def generate(
    members: list[Member],
    exclusion_rules: list[PairRule],
    cohesion_rules: list[PairRule],
    team_count: int,
    max_attempts: int = TEAM_MAX_ATTEMPTS,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
    cancel_event: threading.Event | None = None,
) -> GenerationResult:
    """Module-level entry point using a default-configured service."""
    return TeamGenerationService().generate(
        members,
        exclusion_rules,
        cohesion_rules,
        team_count,
        max_attempts,
        seed=seed,
        rng=rng,
        cancel_event=cancel_event,
    )
