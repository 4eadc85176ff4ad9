"""Tendencias por ventana de días sobre series fechadas (peso, puntajes)."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from glp1_tool.errors import PreconditionError
from glp1_tool.model import DatedValue, TrendResult, WeightEntry, WeightUnit

# Banda muerta: variaciones de hasta 0.5 % cuentan como estables.
STABLE_BAND_PCT = 0.5

_LBS_TO_KG = 0.453592
_KG_TO_LBS = 2.20462


def windowed_trend(
    series: Sequence[DatedValue], window_days: int, today: date
) -> TrendResult | None:
    """Change between the first and last points inside the window.

    The window is ``[today - window_days, today]``, both ends inclusive.

    Args:
        series: Dated values, any order.
        window_days: Window length in days.
        today: Reference date.

    Returns:
        TrendResult, or None when fewer than 2 points fall in the window.

    Raises:
        PreconditionError: If the first value in the window is zero.
    """
    cutoff = today - timedelta(days=window_days)
    recent = sorted(
        (p for p in series if cutoff <= p.day <= today), key=lambda p: p.day
    )
    if len(recent) < 2:
        return None

    first = recent[0].value
    last = recent[-1].value
    if first == 0:
        raise PreconditionError("percent change undefined: first value is 0")
    change = last - first
    percent_change = change / first * 100

    if abs(percent_change) <= STABLE_BAND_PCT:
        direction = "stable"
    elif change > 0:
        direction = "up"
    else:
        direction = "down"
    return TrendResult(
        change=change, percent_change=percent_change, direction=direction
    )


def convert_weight(value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """Convert a weight between lbs and kg."""
    if from_unit == to_unit:
        return value
    if from_unit == "lbs":
        return value * _LBS_TO_KG
    return value * _KG_TO_LBS


def weights_to_series(
    weights: Sequence[WeightEntry], unit: WeightUnit = "lbs"
) -> list[DatedValue]:
    return [
        DatedValue(day=w.day, value=convert_weight(w.weight, w.unit, unit))
        for w in weights
    ]


def weight_trend(
    weights: Sequence[WeightEntry],
    today: date,
    window_days: int = 30,
    unit: WeightUnit = "lbs",
) -> TrendResult | None:
    """Weight trend over the last ``window_days``, expressed in ``unit``."""
    return windowed_trend(weights_to_series(weights, unit), window_days, today)
