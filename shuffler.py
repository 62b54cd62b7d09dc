"""
Constraint-aware team shuffling: randomized greedy construction plus local search.
"""

import logging
import random
from collections.abc import Iterator
from dataclasses import dataclass

from config import ALLOCATOR_SETTINGS
from domain.models.allocation import AtomicGroup, QualityVector, TargetDistribution, TeamState
from domain.services.constraint_graph import GroupConflictProjection
from domain.services.quality_evaluator import PERFECT_RANK, AllocationRank, QualityEvaluator

logger = logging.getLogger("team_builder.shuffler")


@dataclass
class RefinementResult:
    """Result of local search over one allocation."""

    teams: list[TeamState]
    quality: QualityVector
    size_deviation: int
    iterations: int
    relocations: int
    swaps: int

    @property
    def improvements(self) -> int:
        return self.relocations + self.swaps

    @property
    def rank(self) -> AllocationRank:
        return self.size_deviation, self.quality


@dataclass(frozen=True)
class _Move:
    source: TeamState
    target: TeamState
    group: AtomicGroup
    swap_with: AtomicGroup | None = None


class TeamShuffler:
    """
    Builds one allocation attempt and improves it.

    Each attempt shuffles the atomic groups, places hard-to-place groups first,
    and greedily puts every group into the eligible team with the lowest
    placement penalty. The result is then refined by best-improvement hill
    climbing over single-group relocations and pairwise swaps.
    """

    def __init__(
        self,
        skill_penalty_weight: float | None = None,
        category_overfill_weight: float | None = None,
        category_underfill_weight: float | None = None,
        tie_tolerance: float | None = None,
        local_search_max_iterations: int | None = None,
    ):
        """
        Initialize the shuffler.

        Args:
            skill_penalty_weight: Weight on |projected skill - ideal skill| (default 1.3)
            category_overfill_weight: Penalty per unit above a category target (default 8.0)
            category_underfill_weight: Penalty per unit below a category target (default 0.4)
            tie_tolerance: Scores within this band are treated as tied (default 1e-4)
            local_search_max_iterations: Refiner iteration cap (default 120)
        """
        settings = ALLOCATOR_SETTINGS
        self.skill_penalty_weight = (
            skill_penalty_weight
            if skill_penalty_weight is not None
            else settings["skill_penalty_weight"]
        )
        self.category_overfill_weight = (
            category_overfill_weight
            if category_overfill_weight is not None
            else settings["category_overfill_weight"]
        )
        self.category_underfill_weight = (
            category_underfill_weight
            if category_underfill_weight is not None
            else settings["category_underfill_weight"]
        )
        self.tie_tolerance = (
            tie_tolerance if tie_tolerance is not None else settings["tie_tolerance"]
        )
        self.local_search_max_iterations = (
            local_search_max_iterations
            if local_search_max_iterations is not None
            else settings["local_search_max_iterations"]
        )

    # ------------------------------------------------------------------
    # Randomized greedy construction
    # ------------------------------------------------------------------

    def order_groups(
        self,
        groups: list[AtomicGroup],
        projection: GroupConflictProjection,
        rng: random.Random,
    ) -> list[AtomicGroup]:
        """
        Shuffle groups, then stable-sort hardest-first.

        Sort keys: conflict degree, size, skill sum (all descending). The shuffle
        decides the order among groups that tie on all three.
        """
        shuffled = list(groups)
        rng.shuffle(shuffled)
        return sorted(
            shuffled,
            key=lambda g: (projection.degree(g), g.size, g.skill_sum),
            reverse=True,
        )

    def score_placement(
        self,
        team: TeamState,
        group: AtomicGroup,
        targets: TargetDistribution,
    ) -> float:
        """
        Penalty for placing `group` into `team` (lower is better).

        Combines the weighted distance of the projected skill sum from the
        per-team ideal, how full the team would become, and over/underfill of
        every category the group contributes to.
        """
        target_size = targets.team_sizes[team.index]
        next_size = team.size + group.size
        next_skill = team.skill_sum + group.skill_sum

        skill_penalty = abs(next_skill - targets.ideal_skill) * self.skill_penalty_weight
        size_penalty = next_size / target_size if target_size else float(next_size)

        category_penalty = 0.0
        for category, added in group.category_counts.items():
            if added <= 0:
                continue
            projected = team.category_counts[category] + added
            target = targets.category_targets[category][team.index]
            if projected > target:
                category_penalty += (projected - target) * self.category_overfill_weight
            else:
                category_penalty += abs(projected - target) * self.category_underfill_weight

        return skill_penalty + size_penalty + category_penalty

    def pick_team(
        self,
        group: AtomicGroup,
        teams: list[TeamState],
        targets: TargetDistribution,
        group_conflicts: dict[int, set[int]],
        rng: random.Random,
    ) -> TeamState | None:
        """
        Choose the eligible team with the lowest placement penalty.

        A team is eligible when it has room for the whole group and holds no
        group the candidate conflicts with. Near-ties are broken at random.

        Returns:
            The chosen team, or None if no team is eligible
        """
        scored: list[tuple[float, TeamState]] = []
        for team in teams:
            if team.remaining_capacity < group.size:
                continue
            if team.has_conflict_with(group, group_conflicts):
                continue
            scored.append((self.score_placement(team, group, targets), team))

        if not scored:
            return None
        best_score = min(score for score, _ in scored)
        best_teams = [team for score, team in scored if score - best_score < self.tie_tolerance]
        return rng.choice(best_teams)

    @staticmethod
    def team_capacities(groups: list[AtomicGroup], targets: TargetDistribution) -> list[int]:
        """
        Per-team capacity: the target size plus the slack cohesion groups need.

        With only single-member groups every team fills exactly to its target.
        A team below its target can always take a group of size g when its
        capacity is target + g - 1, so the greedy pass never runs out of room
        for reasons other than exclusions.
        """
        slack = max((g.size for g in groups), default=1) - 1
        return [size + slack for size in targets.team_sizes]

    def build_allocation(
        self,
        groups: list[AtomicGroup],
        targets: TargetDistribution,
        projection: GroupConflictProjection,
        rng: random.Random,
    ) -> list[TeamState] | None:
        """
        Run one randomized greedy attempt.

        Args:
            groups: All atomic groups
            targets: Per-team targets
            projection: Group-level conflicts
            rng: The call's random generator

        Returns:
            Fully assigned teams, or None if some group had no eligible team
        """
        teams = [
            TeamState(index=i, capacity=capacity)
            for i, capacity in enumerate(self.team_capacities(groups, targets))
        ]

        for group in self.order_groups(groups, projection, rng):
            team = self.pick_team(group, teams, targets, projection.group_conflicts, rng)
            if team is None:
                logger.debug(f"Attempt infeasible: no eligible team for {group}")
                return None
            team.add_group(group)

        return teams

    # ------------------------------------------------------------------
    # Local search
    # ------------------------------------------------------------------

    def _candidate_moves(
        self,
        teams: list[TeamState],
        group_conflicts: dict[int, set[int]],
    ) -> Iterator[_Move]:
        """Yield every feasible relocation, then every feasible pairwise swap."""
        for source in teams:
            for group in list(source.groups):
                for target in teams:
                    if target is source or target.remaining_capacity < group.size:
                        continue
                    if target.has_conflict_with(group, group_conflicts):
                        continue
                    yield _Move(source, target, group)

        for i, source in enumerate(teams):
            for target in teams[i + 1:]:
                for group in list(source.groups):
                    for other in list(target.groups):
                        delta = other.size - group.size
                        if source.size + delta > source.capacity:
                            continue
                        if target.size - delta > target.capacity:
                            continue
                        if target.has_conflict_with(group, group_conflicts, ignore=other):
                            continue
                        if source.has_conflict_with(other, group_conflicts, ignore=group):
                            continue
                        yield _Move(source, target, group, swap_with=other)

    @staticmethod
    def _apply(move: _Move) -> tuple[int, int | None]:
        source_position = move.source.remove_group(move.group)
        target_position = None
        if move.swap_with is not None:
            target_position = move.target.remove_group(move.swap_with)
            move.source.add_group(move.swap_with, source_position)
        move.target.add_group(move.group, target_position)
        return source_position, target_position

    @staticmethod
    def _undo(move: _Move, positions: tuple[int, int | None]) -> None:
        source_position, target_position = positions
        move.target.remove_group(move.group)
        if move.swap_with is not None:
            move.source.remove_group(move.swap_with)
            move.target.add_group(move.swap_with, target_position)
        move.source.add_group(move.group, source_position)

    def refine(
        self,
        teams: list[TeamState],
        evaluator: QualityEvaluator,
        group_conflicts: dict[int, set[int]],
    ) -> RefinementResult:
        """
        Best-improvement hill climbing over relocations and pairwise swaps.

        Every feasible move is tried and scored with the evaluator's rank
        (size deviation, then the quality vector); the single best strictly
        improving move is applied per iteration. Three-way rotations are not
        explored.

        Args:
            teams: A feasible allocation (modified in place)
            evaluator: Quality evaluator bound to the call's targets
            group_conflicts: Group-level exclusion adjacency

        Returns:
            RefinementResult with the refined teams and their rank
        """
        current = evaluator.rank(teams)
        iterations = 0
        relocations = 0
        swaps = 0

        while iterations < self.local_search_max_iterations and current != PERFECT_RANK:
            iterations += 1
            best_move: _Move | None = None
            best_rank = current

            for move in self._candidate_moves(teams, group_conflicts):
                positions = self._apply(move)
                rank = evaluator.rank(teams)
                self._undo(move, positions)
                if rank < best_rank:
                    best_rank = rank
                    best_move = move

            if best_move is None:
                break

            self._apply(best_move)
            current = best_rank
            if best_move.swap_with is None:
                relocations += 1
            else:
                swaps += 1

        size_deviation, quality = current
        logger.debug(
            f"Local search: {relocations} relocations and {swaps} swaps in {iterations} "
            f"iterations, size deviation={size_deviation}, quality={quality.as_tuple()}"
        )
        return RefinementResult(
            teams=teams,
            quality=quality,
            size_deviation=size_deviation,
            iterations=iterations,
            relocations=relocations,
            swaps=swaps,
        )
