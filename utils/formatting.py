"""
Shared text formatting for generated teams.
"""

from collections.abc import Iterable

from domain.models.allocation import QualityVector
from domain.models.member import Category, Member

CATEGORY_NAMES = {
    Category.A: "A",
    Category.B: "B",
    Category.UNKNOWN: "unknown",
}


def format_member_line(member: Member) -> str:
    """Return a bullet line like '- Eva (level 2, A)'."""
    return f"- {member.name} (level {member.level}, {CATEGORY_NAMES[member.category]})"


def format_teams_as_text(teams: Iterable[list[Member]]) -> str:
    """
    Render teams as plain text for copying or exporting.

    Each team becomes a "Team N" heading followed by one line per member;
    teams are separated by a blank line.
    """
    blocks = []
    for index, team in enumerate(teams, 1):
        lines = [f"Team {index}"] + [format_member_line(m) for m in team]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def summarize_team(team: list[Member]) -> str:
    """Return a one-line summary: skill sum and category counts."""
    skill_sum = sum(m.level for m in team)
    count_a = sum(1 for m in team if m.category == Category.A)
    count_b = sum(1 for m in team if m.category == Category.B)
    return f"Skill sum: {skill_sum} • A: {count_a} • B: {count_b}"


def format_quality(quality: QualityVector) -> str:
    """Compact quality vector display for logs."""
    return (
        f"level gap={quality.level_count_gap}, level dev={quality.level_count_deviation}, "
        f"skill range={quality.skill_sum_range}, skill dev={quality.skill_sum_deviation:.2f}, "
        f"category dev={quality.category_deviation}"
    )
