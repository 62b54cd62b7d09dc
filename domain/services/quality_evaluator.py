"""
Allocation quality evaluation.

Produces the QualityVector used both by local search and to rank attempts.
"""

from collections.abc import Sequence

from domain.models.allocation import PERFECT_QUALITY, QualityVector, TargetDistribution, TeamState

# (size deviation, quality vector); compared lexicographically like the vector itself
AllocationRank = tuple[int, QualityVector]

PERFECT_RANK: AllocationRank = (0, PERFECT_QUALITY)


def _sorted_deviation(counts: list[int], targets: list[int]) -> int:
    """Sum of |count - target| after pairing counts and targets largest-first."""
    return sum(
        abs(count - target)
        for count, target in zip(sorted(counts, reverse=True), sorted(targets, reverse=True))
    )


class QualityEvaluator:
    """
    Pure domain service scoring a complete allocation.

    Allocations are ranked by size deviation first (only cohesion groups can
    force uneven sizes), then by the quality vector components in order:
    - level_count_gap: per-level spread beyond the unavoidable remainder
    - level_count_deviation: distance of level counts from the even split
    - skill_sum_range: strongest minus weakest team skill sum
    - skill_sum_deviation: total distance of skill sums from the ideal
    - category_deviation: distance of category counts from the even split
    """

    def __init__(self, targets: TargetDistribution):
        self.targets = targets
        # A level whose total does not divide evenly must differ by one somewhere
        self._level_spread_allowance = {
            level: max(split) - min(split) for level, split in targets.level_targets.items()
        }

    def evaluate(self, teams: Sequence[TeamState]) -> QualityVector:
        level_gap = 0
        level_deviation = 0
        for level, level_targets in self.targets.level_targets.items():
            counts = [team.level_counts[level] for team in teams]
            spread = max(counts) - min(counts)
            level_gap += max(0, spread - self._level_spread_allowance[level])
            level_deviation += _sorted_deviation(counts, level_targets)

        skill_sums = [team.skill_sum for team in teams]
        ideal_skill = self.targets.ideal_skill
        skill_deviation = round(sum(abs(s - ideal_skill) for s in skill_sums), 6)

        category_deviation = sum(
            _sorted_deviation([team.category_counts[category] for team in teams], category_targets)
            for category, category_targets in self.targets.category_targets.items()
        )

        return QualityVector(
            level_count_gap=level_gap,
            level_count_deviation=level_deviation,
            skill_sum_range=max(skill_sums) - min(skill_sums),
            skill_sum_deviation=skill_deviation,
            category_deviation=category_deviation,
        )

    def size_deviation(self, teams: Sequence[TeamState]) -> int:
        """Distance of team sizes from the even split (cohesion groups can force some)."""
        return _sorted_deviation([team.size for team in teams], self.targets.team_sizes)

    def rank(self, teams: Sequence[TeamState]) -> AllocationRank:
        """Comparison key for allocations: size deviation first, then the quality vector."""
        return self.size_deviation(teams), self.evaluate(teams)

    def is_better(
        self,
        candidate: AllocationRank | QualityVector,
        incumbent: AllocationRank | QualityVector | None,
    ) -> bool:
        """Strict lexicographic improvement (anything beats no incumbent)."""
        return incumbent is None or candidate < incumbent
