"""
Standard error codes for team generation.

These error codes allow callers to programmatically handle specific failure
conditions without parsing error message text.

Usage:
    from services import error_codes
    from services.result import GenerationResult

    if not present:
        return GenerationResult.fail(
            "No members are marked present.",
            code=error_codes.EMPTY_ROSTER,
            suggestion="Mark at least one member as present and try again.",
        )
"""

# Input errors
DUPLICATE_IDENTITY = "duplicate_identity"
INVALID_MEMBER = "invalid_member"
EMPTY_ROSTER = "empty_roster"
TEAM_COUNT_OUT_OF_RANGE = "team_count_out_of_range"
TEAM_COUNT_EXCEEDS_PRESENT = "team_count_exceeds_present"

# Rule errors
SELF_REFERENTIAL_RULE = "self_referential_rule"
UNKNOWN_IDENTITY_RULE = "unknown_identity_rule"
CONFLICTING_RULES = "conflicting_rules"

# Structural infeasibility
OVERSIZED_GROUP = "oversized_group"

# Search exhaustion
NO_FEASIBLE_ALLOCATION = "no_feasible_allocation"
CANCELLED = "cancelled"

# Error kinds group codes into the four failure families
KIND_INPUT = "input"
KIND_RULE = "rule"
KIND_STRUCTURAL = "structural"
KIND_SEARCH = "search"

ERROR_KINDS: dict[str, str] = {
    DUPLICATE_IDENTITY: KIND_INPUT,
    INVALID_MEMBER: KIND_INPUT,
    EMPTY_ROSTER: KIND_INPUT,
    TEAM_COUNT_OUT_OF_RANGE: KIND_INPUT,
    TEAM_COUNT_EXCEEDS_PRESENT: KIND_INPUT,
    SELF_REFERENTIAL_RULE: KIND_RULE,
    UNKNOWN_IDENTITY_RULE: KIND_RULE,
    CONFLICTING_RULES: KIND_RULE,
    OVERSIZED_GROUP: KIND_STRUCTURAL,
    NO_FEASIBLE_ALLOCATION: KIND_SEARCH,
    CANCELLED: KIND_SEARCH,
}
