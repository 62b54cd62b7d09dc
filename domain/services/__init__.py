"""
Domain services containing pure allocation logic.
"""

from domain.services.constraint_graph import (
    ConstraintGraphBuilder,
    DisjointSet,
    form_atomic_groups,
    project_group_conflicts,
)
from domain.services.quality_evaluator import QualityEvaluator
from domain.services.roster_normalizer import normalize_roster, parse_name_lines
from domain.services.rule_validator import RuleValidator
from domain.services.target_distribution import calculate_target_distribution, split_evenly

__all__ = [
    "ConstraintGraphBuilder",
    "DisjointSet",
    "QualityEvaluator",
    "RuleValidator",
    "calculate_target_distribution",
    "form_atomic_groups",
    "normalize_roster",
    "parse_name_lines",
    "project_group_conflicts",
    "split_evenly",
]
