"""
Pair rule validation domain service.

Classifies exclusion/cohesion rules against the normalized roster.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.models.member import PairRule, make_pair_key, normalize_name


@dataclass
class RuleValidation:
    """
    Outcome of validating one rule set.

    Attributes:
        active_pairs: Deduplicated (key_a, key_b) pairs where both sides are present
        self_referential: Rules whose two sides normalize to the same identity
        dangling: Rules naming an identity that is not on the roster
        inactive: Rules whose identities exist but are not both present (ignored)
    """

    active_pairs: list[tuple[str, str]] = field(default_factory=list)
    self_referential: list[PairRule] = field(default_factory=list)
    dangling: list[PairRule] = field(default_factory=list)
    inactive: list[PairRule] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.self_referential and not self.dangling


class RuleValidator:
    """
    Pure domain service for pair rule classification.

    Responsibilities:
    - Reject self-referential rules
    - Reject rules that reference unknown identities
    - Drop rules involving absent members
    - Collapse duplicate rules by canonical pair key
    """

    def __init__(self, roster_keys: set[str], present_keys: set[str]):
        """
        Initialize the validator.

        Args:
            roster_keys: Identity keys of the full normalized roster
            present_keys: Identity keys of the present subset
        """
        self.roster_keys = roster_keys
        self.present_keys = present_keys

    def validate(self, rules: Iterable[PairRule]) -> RuleValidation:
        """
        Classify every rule.

        Rules with a blank side are skipped entirely.

        Args:
            rules: Exclusion or cohesion rules as supplied by the caller

        Returns:
            RuleValidation with active pairs and the rejected rules
        """
        validation = RuleValidation()
        seen_pairs: set[str] = set()

        for rule in rules:
            a = normalize_name(rule.a)
            b = normalize_name(rule.b)

            if not a or not b:
                continue

            if a == b:
                validation.self_referential.append(rule)
                continue

            if a not in self.roster_keys or b not in self.roster_keys:
                validation.dangling.append(rule)
                continue

            if a not in self.present_keys or b not in self.present_keys:
                validation.inactive.append(rule)
                continue

            pair_key = make_pair_key(a, b)
            if pair_key in seen_pairs:
                continue
            seen_pairs.add(pair_key)
            validation.active_pairs.append((a, b))

        return validation
