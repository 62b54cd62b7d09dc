"""
Tests for roster normalization and name helpers.
"""

import pytest

from domain.models.member import Category, Member, PairRule, make_pair_key, normalize_name
from domain.services.roster_normalizer import normalize_roster, parse_name_lines


class TestNameHelpers:
    """Test identity key helpers."""

    def test_normalize_trims_and_casefolds(self):
        """Identity keys ignore surrounding whitespace and case."""
        assert normalize_name("  Eva ") == "eva"
        assert normalize_name("EVA") == normalize_name("eva")

    def test_normalize_handles_none(self):
        """A missing name normalizes to the empty key."""
        assert normalize_name(None) == ""

    def test_pair_key_is_order_independent(self):
        """(a, b) and (b, a) share a canonical key."""
        assert make_pair_key("Eva", "adam") == make_pair_key(" ADAM", "eva")
        assert make_pair_key("Eva", "adam") == "adam||eva"

    def test_rule_pair_key(self):
        """PairRule exposes the canonical key of its sides."""
        assert PairRule("Bo", "Al").pair_key == "al||bo"

    def test_member_key(self):
        """Member.key is the normalized display name."""
        assert Member(name="  Lisa Berg ").key == "lisa berg"

    def test_plain_string_category_is_coerced(self):
        """Loaders may pass "A" instead of Category.A."""
        member = Member("Eva", 2, "A")
        assert member.category is Category.A
        assert str(member) == "Eva (level 2, A)"
        assert Member("Bo", 1, "Unknown").category is Category.UNKNOWN

    def test_unknown_category_value_rejected(self):
        with pytest.raises(ValueError):
            Member("Eva", 2, "C")


class TestNormalizeRoster:
    """Test normalize_roster."""

    def test_unique_members_kept_in_order(self):
        """Members without collisions pass through in input order."""
        roster = normalize_roster([Member("Cleo"), Member("Adam"), Member("Bea")])
        assert [m.name for m in roster.members] == ["Cleo", "Adam", "Bea"]
        assert roster.duplicates == []
        assert roster.is_valid

    def test_names_are_cleaned(self):
        """Display names are stored trimmed."""
        roster = normalize_roster([Member("  Eva  ", level=2, category=Category.A)])
        member = roster.members[0]
        assert member.name == "Eva"
        assert member.level == 2
        assert member.category == Category.A

    def test_duplicates_are_reported_not_merged(self):
        """Colliding identities are listed by their later cleaned name."""
        roster = normalize_roster([Member("Eva"), Member(" eva "), Member("Adam")])
        assert roster.duplicates == ["eva"]
        assert [m.name for m in roster.members] == ["Eva", "Adam"]
        assert not roster.is_valid

    def test_each_duplicate_reported_once(self):
        """A name colliding several times is reported once."""
        roster = normalize_roster([Member("Bo"), Member("Bo"), Member("Bo"), Member("Al"), Member("AL")])
        assert roster.duplicates == ["Bo", "AL"]

    def test_blank_names_skipped(self):
        """Entries with an empty cleaned name are ignored."""
        roster = normalize_roster([Member("   "), Member(""), Member("Ida")])
        assert [m.name for m in roster.members] == ["Ida"]
        assert roster.is_valid

    def test_invalid_level_reported(self):
        """Levels outside 1-3 make the roster invalid."""
        roster = normalize_roster([Member("Ida", level=4), Member("Oda", level=2)])
        assert [m.name for m in roster.invalid_members] == ["Ida"]
        assert not roster.is_valid

    def test_present_subset(self):
        """present/present_keys only include members marked present."""
        roster = normalize_roster([Member("Ida"), Member("Oda", present=False)])
        assert [m.name for m in roster.present] == ["Ida"]
        assert roster.present_keys == {"ida"}
        assert roster.keys == {"ida", "oda"}


class TestParseNameLines:
    """Test parse_name_lines."""

    def test_splits_and_cleans(self):
        """Lines are trimmed and blank lines dropped."""
        text = "  Eva\r\nAdam  \n\n   \nBea"
        assert parse_name_lines(text) == ["Eva", "Adam", "Bea"]

    def test_empty_text(self):
        """Empty input yields no names."""
        assert parse_name_lines("") == []
