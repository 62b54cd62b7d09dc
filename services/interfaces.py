"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts between the generation
engine and its collaborators. Storage, authentication and rendering live
outside this package and plug in through these boundaries.
"""

import random
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models.member import Member, PairRule
    from services.result import GenerationResult


class IRosterSource(ABC):
    """Supplies a roster snapshot and its rules (e.g. from persisted state)."""

    @abstractmethod
    def load_members(self) -> list["Member"]:
        """Return the roster, including absent members."""
        ...

    @abstractmethod
    def load_exclusion_rules(self) -> list["PairRule"]:
        """Return pairs that must not share a team."""
        ...

    @abstractmethod
    def load_cohesion_rules(self) -> list["PairRule"]:
        """Return pairs that must share a team."""
        ...


class ITeamGenerationService(ABC):
    """Interface for the team generation engine."""

    @abstractmethod
    def generate(
        self,
        members: list["Member"],
        exclusion_rules: list["PairRule"],
        cohesion_rules: list["PairRule"],
        team_count: int,
        max_attempts: int | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "GenerationResult":
        """Partition present members into team_count teams."""
        ...

    @abstractmethod
    def generate_from_source(
        self,
        source: IRosterSource,
        team_count: int,
        max_attempts: int | None = None,
        *,
        seed: int | None = None,
    ) -> "GenerationResult":
        """Load a snapshot from `source` and generate teams from it."""
        ...
