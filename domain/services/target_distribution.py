"""
Target distribution calculation.
"""

from domain.models.allocation import TargetDistribution
from domain.models.member import BALANCED_CATEGORIES, LEVELS, Member


def split_evenly(total: int, buckets: int) -> list[int]:
    """
    Split `total` units across `buckets` as evenly as possible.

    Every bucket gets total // buckets; the first total % buckets buckets get one more.

    Raises:
        ValueError: If buckets < 1 or total < 0
    """
    if buckets < 1:
        raise ValueError(f"Need at least one bucket, got {buckets}")
    if total < 0:
        raise ValueError(f"Cannot split a negative total ({total})")
    base, remainder = divmod(total, buckets)
    return [base + 1 if index < remainder else base for index in range(buckets)]


def calculate_target_distribution(members: list[Member], team_count: int) -> TargetDistribution:
    """
    Compute per-team targets for size, balanced categories and levels.

    Args:
        members: Present members
        team_count: Number of teams

    Returns:
        TargetDistribution
    """
    category_targets = {
        category: split_evenly(sum(1 for m in members if m.category == category), team_count)
        for category in BALANCED_CATEGORIES
    }
    level_targets = {
        level: split_evenly(sum(1 for m in members if m.level == level), team_count)
        for level in LEVELS
    }
    return TargetDistribution(
        team_sizes=split_evenly(len(members), team_count),
        category_targets=category_targets,
        level_targets=level_targets,
        total_skill=sum(m.level for m in members),
    )
