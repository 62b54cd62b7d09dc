"""
Centralized configuration for the team builder.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_optional_int(env_var: str) -> int | None:
    raw = os.getenv(env_var)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


# Team count bounds accepted by the generator
MIN_TEAM_COUNT = _parse_int("MIN_TEAM_COUNT", 2)
MAX_TEAM_COUNT = _parse_int("MAX_TEAM_COUNT", 10)

# Outer attempt budget per generate() call
TEAM_MAX_ATTEMPTS = _parse_int("TEAM_MAX_ATTEMPTS", 2000)

# Default PRNG seed; unset means a fresh unseeded generator per call
TEAM_GENERATOR_SEED: int | None = _parse_optional_int("TEAM_GENERATOR_SEED")

ALLOCATOR_SETTINGS: dict[str, Any] = {
    "skill_penalty_weight": _parse_float("SKILL_PENALTY_WEIGHT", 1.3),
    # Overfill is weighted 20x underfill
    "category_overfill_weight": _parse_float("CATEGORY_OVERFILL_WEIGHT", 8.0),
    "category_underfill_weight": _parse_float("CATEGORY_UNDERFILL_WEIGHT", 0.4),
    "tie_tolerance": _parse_float("TIE_TOLERANCE", 1e-4),
    "local_search_max_iterations": _parse_int("LOCAL_SEARCH_MAX_ITERATIONS", 120),
}
