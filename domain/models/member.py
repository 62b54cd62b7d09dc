"""
Member and pair rule domain models.
"""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Category attribute balanced across teams."""

    A = "A"
    B = "B"
    UNKNOWN = "Unknown"


# Only these categories carry per-team targets
BALANCED_CATEGORIES = (Category.A, Category.B)

LEVELS = (1, 2, 3)


def clean_name(value: str | None) -> str:
    """Strip surrounding whitespace from a raw name."""
    return (value or "").strip()


def normalize_name(value: str | None) -> str:
    """Return the identity key for a raw name (trimmed and case-folded)."""
    return clean_name(value).casefold()


def make_pair_key(a: str, b: str) -> str:
    """
    Build the canonical key for an unordered pair of names.

    Both sides are normalized, sorted, and joined with "||" so that
    (a, b) and (b, a) map to the same key.
    """
    first = normalize_name(a)
    second = normalize_name(b)
    if second < first:
        first, second = second, first
    return f"{first}||{second}"


@dataclass(frozen=True)
class Member:
    """
    Represents one person on the roster.

    This is a pure domain model with no infrastructure dependencies.
    """

    name: str
    level: int = 1
    category: Category = Category.UNKNOWN
    present: bool = True

    def __post_init__(self):
        # Accept plain strings such as "A" from loaders
        object.__setattr__(self, "category", Category(self.category))

    @property
    def key(self) -> str:
        """Normalized identity key."""
        return normalize_name(self.name)

    def with_name(self, name: str) -> "Member":
        """Copy of this member with a different display name."""
        return Member(name=name, level=self.level, category=self.category, present=self.present)

    def with_presence(self, present: bool) -> "Member":
        """Copy of this member with a different presence flag."""
        return Member(name=self.name, level=self.level, category=self.category, present=present)

    def __str__(self) -> str:
        return f"{self.name} (level {self.level}, {self.category.value})"


@dataclass(frozen=True)
class PairRule:
    """Unordered pair of names used for exclusion and cohesion rules."""

    a: str
    b: str

    @property
    def pair_key(self) -> str:
        return make_pair_key(self.a, self.b)

    def __str__(self) -> str:
        return f"{clean_name(self.a)} / {clean_name(self.b)}"
