"""
Tests for QualityEvaluator and the quality vector ordering.
"""

from domain.models.allocation import PERFECT_QUALITY, AtomicGroup, QualityVector, TeamState
from domain.models.member import Category, Member
from domain.services.quality_evaluator import PERFECT_RANK, QualityEvaluator
from domain.services.target_distribution import calculate_target_distribution


def build_teams(split: list[list[Member]]) -> list[TeamState]:
    """Wrap each member list in a TeamState (one singleton group per member)."""
    teams = []
    group_id = 0
    for index, members in enumerate(split):
        team = TeamState(index=index, capacity=len(members))
        for member in members:
            team.add_group(AtomicGroup.from_members(group_id, [member]))
            group_id += 1
        teams.append(team)
    return teams


class TestQualityVectorOrdering:
    """Vectors compare lexicographically, lower is better."""

    def test_earlier_component_dominates(self):
        assert QualityVector(0, 0, 5, 9.0, 9) < QualityVector(0, 1, 0, 0.0, 0)
        assert QualityVector(1, 0, 0, 0.0, 0) > QualityVector(0, 9, 9, 9.0, 9)

    def test_perfect(self):
        assert PERFECT_QUALITY.is_perfect
        assert not QualityVector(category_deviation=1).is_perfect
        assert PERFECT_QUALITY.as_tuple() == (0, 0, 0, 0.0, 0)


class TestQualityEvaluator:
    """Test QualityEvaluator.evaluate."""

    def test_perfect_split(self):
        """Mirror-image teams score a perfect vector."""
        eva, adam = Member("Eva", 3, Category.A), Member("Adam", 1, Category.B)
        bea, cleo = Member("Bea", 3, Category.A), Member("Cleo", 1, Category.B)
        targets = calculate_target_distribution([eva, adam, bea, cleo], 2)
        teams = build_teams([[eva, adam], [bea, cleo]])

        assert QualityEvaluator(targets).evaluate(teams) == PERFECT_QUALITY

    def test_stacked_split(self):
        """Putting both strong members together is penalized on every axis."""
        eva, adam = Member("Eva", 3, Category.A), Member("Adam", 1, Category.B)
        bea, cleo = Member("Bea", 3, Category.A), Member("Cleo", 1, Category.B)
        targets = calculate_target_distribution([eva, adam, bea, cleo], 2)
        teams = build_teams([[eva, bea], [adam, cleo]])

        quality = QualityEvaluator(targets).evaluate(teams)

        assert quality.level_count_gap == 4
        assert quality.level_count_deviation == 4
        assert quality.skill_sum_range == 4
        assert quality.skill_sum_deviation == 4.0
        assert quality.category_deviation == 4

    def test_uneven_level_total_allows_one_spread(self):
        """Three strong and three weak members over two teams: a 2/1 split is not a gap."""
        members = [Member(f"S{i}", 3) for i in range(3)] + [Member(f"W{i}", 1) for i in range(3)]
        targets = calculate_target_distribution(members, 2)
        strong, weak = members[:3], members[3:]
        teams = build_teams([strong[:2] + weak[:1], strong[2:] + weak[1:]])

        quality = QualityEvaluator(targets).evaluate(teams)

        assert quality == QualityVector(0, 0, 2, 2.0, 0)

    def test_deviation_ignores_team_index(self):
        """Counts are matched to targets largest-first, not by team index."""
        members = [Member("A1", 1, Category.A), Member("B1", 1, Category.B), Member("C1", 1)]
        targets = calculate_target_distribution(members, 2)
        # Targets put the extra A on team 0; here team 1 holds it instead
        teams = build_teams([[members[1]], [members[0], members[2]]])

        quality = QualityEvaluator(targets).evaluate(teams)

        assert quality.category_deviation == 0

    def test_is_better(self):
        evaluator = QualityEvaluator(calculate_target_distribution([Member("X"), Member("Y")], 2))
        assert evaluator.is_better(PERFECT_QUALITY, None)
        assert evaluator.is_better(QualityVector(0, 0, 1), QualityVector(0, 0, 2))
        assert not evaluator.is_better(QualityVector(0, 0, 1), QualityVector(0, 0, 1))

    def test_size_deviation_leads_rank(self):
        """A 4/2 split ranks behind 3/3 whatever the quality vector says."""
        members = [Member(f"M{i}", 1) for i in range(6)]
        targets = calculate_target_distribution(members, 2)
        evaluator = QualityEvaluator(targets)
        uneven = build_teams([members[:4], members[4:]])
        even = build_teams([members[:3], members[3:]])

        assert evaluator.size_deviation(uneven) == 2
        assert evaluator.rank(even) == PERFECT_RANK
        assert evaluator.is_better(evaluator.rank(even), evaluator.rank(uneven))
