"""
Allocation domain models: atomic groups, targets, team state and quality.
"""

from dataclasses import dataclass, field

from domain.models.member import BALANCED_CATEGORIES, LEVELS, Category, Member


@dataclass(frozen=True, eq=False)
class AtomicGroup:
    """
    Members forced together by cohesion rules.

    The allocator only ever moves whole groups. Most groups hold a single member.
    """

    id: int
    members: tuple[Member, ...]
    skill_sum: int
    category_counts: dict[Category, int]
    level_counts: dict[int, int]

    @classmethod
    def from_members(cls, group_id: int, members: list[Member]) -> "AtomicGroup":
        category_counts = dict.fromkeys(BALANCED_CATEGORIES, 0)
        level_counts = dict.fromkeys(LEVELS, 0)
        for member in members:
            if member.category in category_counts:
                category_counts[member.category] += 1
            level_counts[member.level] += 1
        return cls(
            id=group_id,
            members=tuple(members),
            skill_sum=sum(m.level for m in members),
            category_counts=category_counts,
            level_counts=level_counts,
        )

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def member_keys(self) -> frozenset[str]:
        return frozenset(m.key for m in self.members)

    def __str__(self) -> str:
        names = ", ".join(m.name for m in self.members)
        return f"Group {self.id}: {names}"


@dataclass(frozen=True)
class TargetDistribution:
    """
    Ideal per-team split of size, category counts and level counts.

    Every list is indexed by team and sorted descending (extra units go to the
    first teams).
    """

    team_sizes: list[int]
    category_targets: dict[Category, list[int]]
    level_targets: dict[int, list[int]]
    total_skill: int

    @property
    def team_count(self) -> int:
        return len(self.team_sizes)

    @property
    def ideal_skill(self) -> float:
        return self.total_skill / self.team_count

    @property
    def max_team_size(self) -> int:
        return max(self.team_sizes)


@dataclass(frozen=True, order=True)
class QualityVector:
    """
    Lexicographically comparable balance summary (lower is better).

    Field order is the comparison order.
    """

    level_count_gap: int = 0
    level_count_deviation: int = 0
    skill_sum_range: int = 0
    skill_sum_deviation: float = 0.0
    category_deviation: int = 0

    @property
    def is_perfect(self) -> bool:
        return self == PERFECT_QUALITY

    def as_tuple(self) -> tuple[int, int, int, float, int]:
        return (
            self.level_count_gap,
            self.level_count_deviation,
            self.skill_sum_range,
            self.skill_sum_deviation,
            self.category_deviation,
        )


PERFECT_QUALITY = QualityVector()


@dataclass
class TeamState:
    """
    Mutable per-attempt state of one team.

    Aggregates are kept in step with `groups` by add_group/remove_group.
    """

    index: int
    capacity: int
    groups: list[AtomicGroup] = field(default_factory=list)
    size: int = 0
    skill_sum: int = 0
    category_counts: dict[Category, int] = field(
        default_factory=lambda: dict.fromkeys(BALANCED_CATEGORIES, 0)
    )
    level_counts: dict[int, int] = field(default_factory=lambda: dict.fromkeys(LEVELS, 0))

    @property
    def remaining_capacity(self) -> int:
        return self.capacity - self.size

    @property
    def members(self) -> list[Member]:
        """Members of all assigned groups, in assignment order."""
        return [m for g in self.groups for m in g.members]

    def add_group(self, group: AtomicGroup, position: int | None = None) -> None:
        if position is None:
            self.groups.append(group)
        else:
            self.groups.insert(position, group)
        self._apply(group, 1)

    def remove_group(self, group: AtomicGroup) -> int:
        """Remove `group` and return the position it occupied."""
        position = next(i for i, g in enumerate(self.groups) if g is group)
        del self.groups[position]
        self._apply(group, -1)
        return position

    def _apply(self, group: AtomicGroup, sign: int) -> None:
        self.size += sign * group.size
        self.skill_sum += sign * group.skill_sum
        for category, count in group.category_counts.items():
            self.category_counts[category] += sign * count
        for level, count in group.level_counts.items():
            self.level_counts[level] += sign * count

    def has_conflict_with(
        self,
        group: AtomicGroup,
        group_conflicts: dict[int, set[int]],
        ignore: AtomicGroup | None = None,
    ) -> bool:
        """
        Check whether `group` conflicts with any group already in this team.

        Args:
            group: Candidate group
            group_conflicts: Group-level exclusion adjacency
            ignore: Group to treat as already removed (used for swaps)
        """
        blocked = group_conflicts.get(group.id)
        if not blocked:
            return False
        for existing in self.groups:
            if ignore is not None and existing.id == ignore.id:
                continue
            if existing.id in blocked:
                return True
        return False
