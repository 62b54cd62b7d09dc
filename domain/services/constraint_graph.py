"""
Constraint graphs and atomic groups.

Turns active pair rules into member-level adjacency, merges cohesion-linked
members into atomic groups, and lifts exclusions to group level.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.models.allocation import AtomicGroup
from domain.models.member import Member


def build_adjacency(keys: Iterable[str], pairs: Iterable[tuple[str, str]]) -> dict[str, set[str]]:
    """Build an undirected adjacency map with an entry for every key."""
    adjacency: dict[str, set[str]] = {key: set() for key in keys}
    for a, b in pairs:
        if a == b:
            continue
        adjacency.setdefault(a, set()).add(b)
        adjacency.setdefault(b, set()).add(a)
    return adjacency


@dataclass
class ConstraintGraphs:
    """Member-level exclusion and cohesion adjacency over present keys."""

    exclusion: dict[str, set[str]]
    cohesion: dict[str, set[str]]


class ConstraintGraphBuilder:
    """Builds both adjacency maps for the present subset."""

    def __init__(self, present_keys: Iterable[str]):
        self.present_keys = list(present_keys)

    def build(
        self,
        exclusion_pairs: Iterable[tuple[str, str]],
        cohesion_pairs: Iterable[tuple[str, str]],
    ) -> ConstraintGraphs:
        return ConstraintGraphs(
            exclusion=build_adjacency(self.present_keys, exclusion_pairs),
            cohesion=build_adjacency(self.present_keys, cohesion_pairs),
        )


class DisjointSet:
    """Union-find over string keys with path compression and union by size."""

    def __init__(self, keys: Iterable[str]):
        self._parent: dict[str, str] = {}
        self._size: dict[str, int] = {}
        for key in keys:
            self._parent[key] = key
            self._size[key] = 1

    def find(self, key: str) -> str:
        root = key
        while self._parent[root] != root:
            root = self._parent[root]
        # Second pass points every node on the path straight at the root
        while self._parent[key] != root:
            self._parent[key], key = root, self._parent[key]
        return root

    def union(self, a: str, b: str) -> str:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size[root_b]
        return root_a


def form_atomic_groups(members: list[Member], cohesion: dict[str, set[str]]) -> list[AtomicGroup]:
    """
    Merge cohesion-linked members into atomic groups.

    Group ids follow the roster position of each group's first member, and
    members keep roster order inside their group.

    Args:
        members: Present members in roster order
        cohesion: Member-level cohesion adjacency

    Returns:
        One AtomicGroup per connected component (singletons included)
    """
    sets = DisjointSet(m.key for m in members)
    for key, linked in cohesion.items():
        for other in linked:
            sets.union(key, other)

    grouped: dict[str, list[Member]] = {}
    for member in members:
        grouped.setdefault(sets.find(member.key), []).append(member)

    return [
        AtomicGroup.from_members(group_id, group_members)
        for group_id, group_members in enumerate(grouped.values())
    ]


@dataclass
class GroupConflictProjection:
    """
    Exclusion adjacency lifted to group level, plus structural problems.

    Attributes:
        group_conflicts: group id -> ids of groups it must not share a team with
        internal_conflicts: (name, name) pairs that are excluded yet forced together
        oversized_groups: Groups larger than the largest team
    """

    group_conflicts: dict[int, set[int]] = field(default_factory=dict)
    internal_conflicts: list[tuple[str, str]] = field(default_factory=list)
    oversized_groups: list[AtomicGroup] = field(default_factory=list)

    def degree(self, group: AtomicGroup) -> int:
        return len(self.group_conflicts.get(group.id, ()))


def project_group_conflicts(
    groups: list[AtomicGroup],
    exclusion: dict[str, set[str]],
    max_team_size: int,
) -> GroupConflictProjection:
    """
    Lift member-level exclusions to groups and detect unresolvable groups.

    Args:
        groups: Atomic groups covering every present member
        exclusion: Member-level exclusion adjacency
        max_team_size: Largest per-team target size

    Returns:
        GroupConflictProjection
    """
    projection = GroupConflictProjection(group_conflicts={g.id: set() for g in groups})
    group_of: dict[str, int] = {}
    names: dict[str, str] = {}
    for group in groups:
        for member in group.members:
            group_of[member.key] = group.id
            names[member.key] = member.name

    reported: set[tuple[str, str]] = set()
    for group in groups:
        for member in group.members:
            for other_key in exclusion.get(member.key, ()):
                other_group = group_of.get(other_key)
                if other_group is None:
                    continue
                if other_group == group.id:
                    pair = tuple(sorted((member.key, other_key)))
                    if pair not in reported:
                        reported.add(pair)
                        projection.internal_conflicts.append((names[pair[0]], names[pair[1]]))
                    continue
                projection.group_conflicts[group.id].add(other_group)
                projection.group_conflicts[other_group].add(group.id)

        if group.size > max_team_size:
            projection.oversized_groups.append(group)

    return projection
