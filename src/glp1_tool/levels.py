"""Modelo de decaimiento exponencial y consultas de nivel de medicación.

El nivel estimado en un instante es la suma de una curva exponencial por
inyección (100 en el momento de la dosis), con tope en 100. El tope es una
aproximación documentada, no superposición farmacocinética real.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from dateutil import tz

from glp1_tool.errors import PreconditionError
from glp1_tool.model import MS_PER_HOUR, DecaySettings, InjectionEvent, LevelSample

MAX_LEVEL = 100.0


def decay_constant(settings: DecaySettings) -> float:
    """Return lambda = ln(2) / half-life, per millisecond."""
    return math.log(2) / settings.half_life_ms


def level_at(
    events: Sequence[InjectionEvent], settings: DecaySettings, at_ms: int
) -> float:
    """Estimated level (0-100) at one instant.

    Events after ``at_ms`` contribute nothing.
    """
    lam = decay_constant(settings)
    total = 0.0
    for event in events:
        if event.occurred_at_ms <= at_ms:
            total += MAX_LEVEL * math.exp(-lam * (at_ms - event.occurred_at_ms))
    return min(total, MAX_LEVEL)


def medication_levels(
    events: Sequence[InjectionEvent],
    settings: DecaySettings,
    window_days: int,
    now_ms: int,
) -> list[LevelSample]:
    """Hourly level samples from ``now - window_days`` to ``now`` (inclusive).

    Args:
        events: Injection events, any order.
        settings: Decay settings (half-life).
        window_days: Days back from ``now_ms`` to sample.
        now_ms: Current instant (epoch ms).

    Returns:
        ``window_days * 24 + 1`` samples, oldest first.

    Raises:
        PreconditionError: If ``window_days`` is negative.
    """
    if window_days < 0:
        raise PreconditionError(f"window_days must be >= 0, got {window_days}")
    hours = window_days * 24
    return [
        LevelSample(at_ms=ts, percent_level=level_at(events, settings, ts))
        for ts in (now_ms - i * MS_PER_HOUR for i in range(hours, -1, -1))
    ]


def current_level(
    events: Sequence[InjectionEvent], settings: DecaySettings, now_ms: int
) -> float:
    """Level at ``now_ms``; 0 when there are no events."""
    return level_at(events, settings, now_ms)


def last_injection(events: Sequence[InjectionEvent]) -> InjectionEvent | None:
    """Most recent event; on equal timestamps the first in input order wins."""
    if not events:
        return None
    return max(events, key=lambda e: e.occurred_at_ms)


def event_date(event: InjectionEvent, zone: tzinfo = tz.UTC) -> date:
    """Calendar date of an event in the given time zone."""
    return ms_to_date(event.occurred_at_ms, zone)


def ms_to_date(ms: int, zone: tzinfo = tz.UTC) -> date:
    return datetime.fromtimestamp(ms / 1000, tz=zone).date()


def days_since_last_injection(
    events: Sequence[InjectionEvent], now_ms: int, zone: tzinfo = tz.UTC
) -> int | None:
    """Whole calendar days between today and the last injection's date."""
    last = last_injection(events)
    if last is None:
        return None
    return (ms_to_date(now_ms, zone) - event_date(last, zone)).days


def next_due_date(
    events: Sequence[InjectionEvent],
    interval_days: int = 7,
    zone: tzinfo = tz.UTC,
) -> date | None:
    """Last injection's date plus ``interval_days``; independent of level."""
    last = last_injection(events)
    if last is None:
        return None
    return event_date(last, zone) + timedelta(days=interval_days)


def level_status(level: float) -> str:
    """Label for a level: optimal (>= 70), moderate (>= 40) or low."""
    if level >= 70:
        return "optimal"
    if level >= 40:
        return "moderate"
    return "low"


def downsample(samples: Sequence[LevelSample], every: int = 4) -> list[LevelSample]:
    """Keep every ``every``-th sample, starting with the oldest."""
    if every < 1:
        raise PreconditionError(f"every must be >= 1, got {every}")
    return list(samples[::every])
