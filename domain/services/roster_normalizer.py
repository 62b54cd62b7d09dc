"""
Roster normalization.

Cleans display names, derives identity keys and reports collisions instead of
merging them.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.models.member import LEVELS, Member, clean_name, normalize_name


@dataclass
class NormalizedRoster:
    """Unique members in input order, plus everything that was rejected."""

    members: list[Member] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    invalid_members: list[Member] = field(default_factory=list)

    @property
    def keys(self) -> set[str]:
        return {m.key for m in self.members}

    @property
    def present(self) -> list[Member]:
        return [m for m in self.members if m.present]

    @property
    def present_keys(self) -> set[str]:
        return {m.key for m in self.members if m.present}

    @property
    def is_valid(self) -> bool:
        return not self.duplicates and not self.invalid_members


def normalize_roster(raw_members: Iterable[Member]) -> NormalizedRoster:
    """
    Deduplicate a raw roster by identity key.

    Entries whose cleaned name is empty are skipped. When two entries share an
    identity key the first one is kept and the later cleaned name is recorded
    as a duplicate (each colliding name once, in first-seen order).

    Args:
        raw_members: Members as supplied by the caller

    Returns:
        NormalizedRoster with cleaned members and collision/validation lists
    """
    roster = NormalizedRoster()
    seen: set[str] = set()

    for member in raw_members:
        cleaned = clean_name(member.name)
        if not cleaned:
            continue

        key = normalize_name(cleaned)
        if key in seen:
            if cleaned not in roster.duplicates:
                roster.duplicates.append(cleaned)
            continue
        seen.add(key)

        if member.level not in LEVELS:
            roster.invalid_members.append(member)

        roster.members.append(member if member.name == cleaned else member.with_name(cleaned))

    return roster


def parse_name_lines(text: str) -> list[str]:
    """Split pasted text into cleaned, non-empty names (one per line)."""
    return [name for name in (clean_name(line) for line in text.splitlines()) if name]
