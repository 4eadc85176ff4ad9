"""Puntaje de salud muscular diario (proteína, agua, fibra, fuerza)."""

from __future__ import annotations

import math
from collections.abc import Sequence

from glp1_tool.errors import PreconditionError
from glp1_tool.model import (
    DEFAULT_TARGETS,
    DailyWellnessEntry,
    HealthScoreBreakdown,
    ScoringTargets,
)

AXIS_MAX = 25.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _axis_score(actual: float, target: float) -> float:
    return min(AXIS_MAX * actual / target, AXIS_MAX)


def _check_non_negative(entry: DailyWellnessEntry) -> None:
    values = {
        "protein_grams": entry.protein_grams,
        "water_oz": entry.water_oz,
        "fiber_grams": entry.fiber_grams,
        "strength_minutes": entry.strength_minutes,
    }
    for name, value in values.items():
        if value is not None and value < 0:
            raise PreconditionError(f"{name} must be >= 0, got {value}")


def score_entry(
    entry: DailyWellnessEntry, targets: ScoringTargets = DEFAULT_TARGETS
) -> HealthScoreBreakdown:
    """Score one day's entry against the daily targets.

    Each axis scores ``min(25, 25 * actual / target)`` and is rounded on its
    own; the total is the sum of the rounded sub-scores.

    Args:
        entry: Daily wellness entry.
        targets: Daily targets (defaults: 100 g, 64 oz, 30 g, 30 min).

    Returns:
        Breakdown with integer sub-scores and total.

    Raises:
        PreconditionError: If any numeric input is negative.
    """
    _check_non_negative(entry)

    protein = _round_half_up(_axis_score(entry.protein_grams, targets.protein_grams))
    hydration = _round_half_up(_axis_score(entry.water_oz, targets.water_oz))
    fiber = _round_half_up(_axis_score(entry.fiber_grams, targets.fiber_grams))
    exercise = 0
    if entry.strength_training and entry.strength_minutes:
        exercise = _round_half_up(
            _axis_score(entry.strength_minutes, targets.strength_minutes)
        )

    return HealthScoreBreakdown(
        day=entry.day,
        total_score=protein + hydration + fiber + exercise,
        protein_score=protein,
        hydration_score=hydration,
        fiber_score=fiber,
        exercise_score=exercise,
    )


def average_score(
    entries: Sequence[DailyWellnessEntry], targets: ScoringTargets = DEFAULT_TARGETS
) -> int | None:
    """Rounded mean of total scores; None if there are no entries."""
    if not entries:
        return None
    total = sum(score_entry(e, targets).total_score for e in entries)
    return _round_half_up(total / len(entries))


def recent_average_score(
    entries: Sequence[DailyWellnessEntry],
    count: int = 7,
    targets: ScoringTargets = DEFAULT_TARGETS,
) -> int | None:
    """Average score of the ``count`` most recent entries by date."""
    recent = sorted(entries, key=lambda e: e.day, reverse=True)[:count]
    return average_score(recent, targets)


def score_band(score: float) -> str:
    # >= 80 excellent, >= 60 good, >= 40 fair
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    return "poor"
