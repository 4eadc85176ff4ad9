"""Agregaciones para el tablero y el reporte médico (pandas)."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict
from datetime import date, datetime, timedelta, tzinfo

import pandas as pd
from dateutil import tz

from glp1_tool.levels import (
    current_level,
    days_since_last_injection,
    event_date,
)
from glp1_tool.model import (
    DailyWellnessEntry,
    DecaySettings,
    InjectionEvent,
    LevelSample,
    ReportSummary,
    WeightEntry,
    WeightUnit,
)
from glp1_tool.scoring import average_score, score_entry
from glp1_tool.trends import convert_weight

NO_SYMPTOM = "None"

INJECTION_COLUMNS = ["datetime", "date", "dose_mg", "site", "symptoms", "notes"]
LEVEL_COLUMNS = ["datetime", "level"]
SCORE_COLUMNS = [
    "date",
    "total_score",
    "protein_score",
    "hydration_score",
    "fiber_score",
    "exercise_score",
]
WEIGHT_COLUMNS = ["date", "weight", "unit"]


def injections_to_frame(
    events: Sequence[InjectionEvent], zone: tzinfo = tz.UTC
) -> pd.DataFrame:
    """One row per injection, sorted by datetime."""
    rows = [
        {
            "datetime": datetime.fromtimestamp(e.occurred_at_ms / 1000, tz=zone),
            "date": event_date(e, zone),
            "dose_mg": e.dose_mg,
            "site": e.site,
            "symptoms": ", ".join(_real_symptoms(e)),
            "notes": e.notes,
        }
        for e in events
    ]
    if not rows:
        return pd.DataFrame(columns=INJECTION_COLUMNS)
    df = pd.DataFrame(rows, columns=INJECTION_COLUMNS)
    return df.sort_values("datetime", kind="stable").reset_index(drop=True)


def levels_to_frame(
    samples: Sequence[LevelSample], zone: tzinfo = tz.UTC
) -> pd.DataFrame:
    """Level samples as a frame, level rounded to one decimal."""
    if not samples:
        return pd.DataFrame(columns=LEVEL_COLUMNS)
    df = pd.DataFrame(
        {
            "datetime": [
                datetime.fromtimestamp(s.at_ms / 1000, tz=zone) for s in samples
            ],
            "level": [s.percent_level for s in samples],
        }
    )
    df["level"] = df["level"].round(1)
    return df


def daily_scores_frame(entries: Sequence[DailyWellnessEntry]) -> pd.DataFrame:
    """Score breakdown per entry, sorted by date."""
    if not entries:
        return pd.DataFrame(columns=SCORE_COLUMNS)
    rows = []
    for entry in entries:
        row = asdict(score_entry(entry))
        row["date"] = row.pop("day")
        rows.append(row)
    df = pd.DataFrame(rows, columns=SCORE_COLUMNS)
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def weights_to_frame(
    weights: Sequence[WeightEntry], unit: WeightUnit = "lbs"
) -> pd.DataFrame:
    """Weigh-ins converted to ``unit``, sorted by date."""
    if not weights:
        return pd.DataFrame(columns=WEIGHT_COLUMNS)
    df = pd.DataFrame(
        {
            "date": [w.day for w in weights],
            "weight": [convert_weight(w.weight, w.unit, unit) for w in weights],
            "unit": unit,
        }
    )
    df["weight"] = df["weight"].round(1)
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def _real_symptoms(event: InjectionEvent) -> list[str]:
    return [s for s in event.symptoms if s != NO_SYMPTOM]


def symptom_counts(events: Sequence[InjectionEvent]) -> dict[str, int]:
    """Symptom frequency, most frequent first (ties by name)."""
    counts = Counter(s for e in events for s in _real_symptoms(e))
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


def site_counts(events: Sequence[InjectionEvent]) -> dict[str, int]:
    """Injection site distribution; events without site are skipped."""
    return dict(Counter(e.site for e in events if e.site))


def _week_start(day: date) -> date:
    # Semanas de domingo a sábado.
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_injection_counts(
    events: Sequence[InjectionEvent],
    today: date,
    weeks: int = 12,
    zone: tzinfo = tz.UTC,
) -> pd.DataFrame:
    """Injections per week from the first injection's week to today's.

    Returns:
        DataFrame (week_start, injections), last ``weeks`` weeks only.
    """
    if not events:
        return pd.DataFrame(columns=["week_start", "injections"])

    days = [event_date(e, zone) for e in events]
    first = _week_start(min(days))
    last = _week_start(today)
    starts = pd.date_range(start=first, end=max(first, last), freq="7D").date

    counts = Counter(_week_start(d) for d in days)
    df = pd.DataFrame(
        {"week_start": starts, "injections": [counts.get(ws, 0) for ws in starts]}
    )
    return df.tail(weeks).reset_index(drop=True)


def symptom_timing(
    events: Sequence[InjectionEvent], zone: tzinfo = tz.UTC
) -> dict[str, float]:
    """Average days since the previous injection when each symptom shows up.

    An injection with no earlier injection counts as 0 days.
    """
    delays: dict[str, list[int]] = {}
    for event in events:
        symptoms = _real_symptoms(event)
        if not symptoms:
            continue
        previous = [e for e in events if e.occurred_at_ms < event.occurred_at_ms]
        days = days_since_last_injection(previous, event.occurred_at_ms, zone) or 0
        for symptom in symptoms:
            delays.setdefault(symptom, []).append(days)
    return {
        symptom: sum(values) / len(values)
        for symptom, values in sorted(delays.items())
    }


def build_report_summary(
    events: Sequence[InjectionEvent],
    weights: Sequence[WeightEntry],
    entries: Sequence[DailyWellnessEntry],
    settings: DecaySettings,
    *,
    start: date,
    end: date,
    now_ms: int,
    unit: WeightUnit = "lbs",
    zone: tzinfo = tz.UTC,
) -> ReportSummary:
    """Doctor-report summary for ``[start, end]`` (calendar dates, inclusive).

    Weight change needs at least two weigh-ins in range, otherwise it is 0.
    The current level uses every injection, not only those in range.
    """
    range_events = [e for e in events if start <= event_date(e, zone) <= end]
    range_weights = sorted(
        (w for w in weights if start <= w.day <= end), key=lambda w: w.day
    )
    range_entries = [e for e in entries if start <= e.day <= end]

    start_weight = end_weight = weight_change = 0.0
    if len(range_weights) >= 2:
        start_weight = convert_weight(
            range_weights[0].weight, range_weights[0].unit, unit
        )
        end_weight = convert_weight(
            range_weights[-1].weight, range_weights[-1].unit, unit
        )
        weight_change = end_weight - start_weight

    counts = symptom_counts(range_events)
    return ReportSummary(
        start=start,
        end=end,
        total_injections=len(range_events),
        start_weight=start_weight,
        end_weight=end_weight,
        weight_change=weight_change,
        avg_score=average_score(range_entries),
        current_level=current_level(events, settings, now_ms),
        symptom_counts=counts,
        top_symptoms=list(counts)[:5],
    )


def summary_to_frame(summary: ReportSummary, unit: WeightUnit = "lbs") -> pd.DataFrame:
    """Two-column (item, value) view of a report summary."""
    rows = [
        ("Período", f"{summary.start.isoformat()} a {summary.end.isoformat()}"),
        ("Inyecciones", summary.total_injections),
        (f"Peso inicial ({unit})", round(summary.start_weight, 1)),
        (f"Peso final ({unit})", round(summary.end_weight, 1)),
        (f"Cambio de peso ({unit})", round(summary.weight_change, 1)),
        ("Puntaje promedio", summary.avg_score),
        ("Nivel actual (%)", round(summary.current_level)),
        ("Síntomas frecuentes", ", ".join(summary.top_symptoms)),
    ]
    return pd.DataFrame(rows, columns=["item", "value"])
