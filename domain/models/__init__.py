"""
Domain models - pure data structures representing roster and allocation entities.
"""

from domain.models.allocation import (
    PERFECT_QUALITY,
    AtomicGroup,
    QualityVector,
    TargetDistribution,
    TeamState,
)
from domain.models.member import Category, Member, PairRule

__all__ = [
    "AtomicGroup",
    "Category",
    "Member",
    "PairRule",
    "PERFECT_QUALITY",
    "QualityVector",
    "TargetDistribution",
    "TeamState",
]
