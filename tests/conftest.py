"""
Pytest fixtures for tests.

Every randomized test draws from a seeded generator so results are reproducible.
"""

import random

import pytest

from domain.models.member import Category, Member
from services.team_generation_service import TeamGenerationService
from shuffler import TeamShuffler


@pytest.fixture(autouse=True)
def no_debug_trace(monkeypatch):
    """Keep the JSONL trace off unless a test enables it explicitly."""
    monkeypatch.delenv("DEBUG_LOG_PATH", raising=False)


@pytest.fixture
def rng():
    """Seeded generator shared by one test."""
    return random.Random(1234)


@pytest.fixture
def shuffler():
    """Shuffler with the default weights."""
    return TeamShuffler(
        skill_penalty_weight=1.3,
        category_overfill_weight=8.0,
        category_underfill_weight=0.4,
        tie_tolerance=1e-4,
        local_search_max_iterations=120,
    )


@pytest.fixture
def service(shuffler):
    """Generation service with the default team count bounds."""
    return TeamGenerationService(
        shuffler=shuffler, min_team_count=2, max_team_count=10, default_max_attempts=200
    )


@pytest.fixture
def make_members():
    """
    Factory for rosters.

    make_members(4) -> Member1..Member4 at level 1.
    make_members(levels=[3, 1]) -> one member per level.
    """

    def _make(
        count: int | None = None,
        *,
        levels: list[int] | None = None,
        categories: list[Category] | None = None,
        prefix: str = "Member",
    ) -> list[Member]:
        if levels is None:
            levels = [1] * (count or 0)
        if categories is None:
            categories = [Category.UNKNOWN] * len(levels)
        return [
            Member(name=f"{prefix}{i + 1}", level=level, category=category)
            for i, (level, category) in enumerate(zip(levels, categories))
        ]

    return _make


@pytest.fixture
def sample_roster():
    """Twelve present members with mixed levels and categories, plus one absent."""
    levels = [3, 3, 3, 3, 2, 2, 2, 2, 1, 1, 1, 1]
    categories = [Category.A, Category.B] * 6
    members = [
        Member(name=f"Player{i + 1}", level=level, category=category)
        for i, (level, category) in enumerate(zip(levels, categories))
    ]
    members.append(Member(name="Absent", level=3, category=Category.A, present=False))
    return members
