from __future__ import annotations

from datetime import date, timedelta

import pytest

from glp1_tool.errors import PreconditionError
from glp1_tool.model import DailyWellnessEntry, ScoringTargets
from glp1_tool.scoring import (
    average_score,
    recent_average_score,
    score_band,
    score_entry,
)

DAY = date(2026, 1, 15)


def _perfect(day: date = DAY) -> DailyWellnessEntry:
    return DailyWellnessEntry(
        day=day,
        protein_grams=100,
        water_oz=64,
        fiber_grams=30,
        strength_training=True,
        strength_minutes=30,
    )


def test_score_entry_all_targets_met() -> None:
    out = score_entry(_perfect())
    assert out.day == DAY
    assert out.protein_score == 25
    assert out.hydration_score == 25
    assert out.fiber_score == 25
    assert out.exercise_score == 25
    assert out.total_score == 100


def test_score_entry_all_zero() -> None:
    out = score_entry(DailyWellnessEntry(day=DAY))
    assert out.total_score == 0
    assert out.exercise_score == 0


def test_score_entry_caps_each_axis_at_25() -> None:
    entry = DailyWellnessEntry(
        day=DAY,
        protein_grams=250,
        water_oz=200,
        fiber_grams=90,
        strength_training=True,
        strength_minutes=120,
    )
    assert score_entry(entry).total_score == 100


def test_exercise_requires_flag_and_minutes() -> None:
    no_flag = DailyWellnessEntry(
        day=DAY, strength_training=False, strength_minutes=30
    )
    no_minutes = DailyWellnessEntry(
        day=DAY, strength_training=True, strength_minutes=None
    )
    assert score_entry(no_flag).exercise_score == 0
    assert score_entry(no_minutes).exercise_score == 0


def test_total_is_sum_of_rounded_sub_scores() -> None:
    # 12.5 + 12.5 + 12.5 + 0 -> 13 + 13 + 13 = 39 (not round(37.5) = 38).
    entry = DailyWellnessEntry(
        day=DAY, protein_grams=50, water_oz=32, fiber_grams=15
    )
    out = score_entry(entry)
    assert (out.protein_score, out.hydration_score, out.fiber_score) == (13, 13, 13)
    assert out.total_score == 39


def test_partial_scores_round_independently() -> None:
    entry = DailyWellnessEntry(
        day=DAY,
        protein_grams=80,
        water_oz=40,
        fiber_grams=10,
        strength_training=True,
        strength_minutes=20,
    )
    out = score_entry(entry)
    assert out.protein_score == 20
    assert out.hydration_score == 16  # 15.625
    assert out.fiber_score == 8  # 8.33
    assert out.exercise_score == 17  # 16.67
    assert out.total_score == 61


def test_negative_inputs_raise() -> None:
    with pytest.raises(PreconditionError, match="protein_grams"):
        score_entry(DailyWellnessEntry(day=DAY, protein_grams=-1))
    with pytest.raises(PreconditionError, match="strength_minutes"):
        score_entry(
            DailyWellnessEntry(day=DAY, strength_training=True, strength_minutes=-5)
        )


def test_custom_targets() -> None:
    targets = ScoringTargets(protein_grams=50)
    entry = DailyWellnessEntry(day=DAY, protein_grams=50)
    assert score_entry(entry, targets).protein_score == 25
    with pytest.raises(PreconditionError, match="water_oz"):
        ScoringTargets(water_oz=0)


def test_average_score() -> None:
    assert average_score([]) is None
    assert average_score([_perfect(), DailyWellnessEntry(day=DAY)]) == 50


def test_recent_average_score_uses_latest_entries() -> None:
    entries = [_perfect(DAY - timedelta(days=i)) for i in range(7)]
    entries.append(DailyWellnessEntry(day=DAY - timedelta(days=30)))
    assert recent_average_score(entries) == 100
    assert recent_average_score(entries, count=8) == 88
    assert recent_average_score([]) is None


def test_score_band() -> None:
    assert score_band(80) == "excellent"
    assert score_band(79) == "good"
    assert score_band(60) == "good"
    assert score_band(40) == "fair"
    assert score_band(39) == "poor"
