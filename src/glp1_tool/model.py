"""Modelos tipados para inyecciones, peso, bienestar diario y resultados."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from glp1_tool.errors import PreconditionError

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR

WeightUnit = Literal["lbs", "kg"]
Direction = Literal["up", "down", "stable"]

# Vida media (días) por tipo de medicación.
MEDICATION_HALF_LIVES: dict[str, float] = {
    "semaglutide": 7.0,
    "tirzepatide": 5.0,
    "other": 7.0,
}


@dataclass(frozen=True)
class InjectionEvent:
    """One injection (timestamped, epoch milliseconds)."""

    occurred_at_ms: int
    dose_mg: float | None = None
    site: str | None = None
    symptoms: tuple[str, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class DecaySettings:
    """Half-life parameter for the decay model."""

    half_life_days: float

    def __post_init__(self) -> None:
        if not self.half_life_days > 0:
            raise PreconditionError(
                f"half_life_days must be > 0, got {self.half_life_days!r}"
            )

    @classmethod
    def for_medication(cls, medication: str) -> DecaySettings:
        """Build settings from a medication preset.

        Raises:
            PreconditionError: If the medication name is unknown.
        """
        try:
            return cls(half_life_days=MEDICATION_HALF_LIVES[medication])
        except KeyError:
            raise PreconditionError(f"Unknown medication: {medication}") from None

    @property
    def half_life_ms(self) -> float:
        return self.half_life_days * MS_PER_DAY


@dataclass(frozen=True)
class LevelSample:
    """Estimated active-medication level at one instant."""

    at_ms: int
    percent_level: float


@dataclass(frozen=True)
class DailyWellnessEntry:
    """Nutrition and exercise metrics for one day."""

    day: date
    protein_grams: float = 0.0
    water_oz: float = 0.0
    fiber_grams: float = 0.0
    strength_training: bool = False
    strength_minutes: float | None = None
    exercises: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoringTargets:
    """Daily targets for the health score (25 points each)."""

    protein_grams: float = 100.0
    water_oz: float = 64.0
    fiber_grams: float = 30.0
    strength_minutes: float = 30.0

    def __post_init__(self) -> None:
        for name in ("protein_grams", "water_oz", "fiber_grams", "strength_minutes"):
            if not getattr(self, name) > 0:
                raise PreconditionError(f"target {name} must be > 0")


DEFAULT_TARGETS = ScoringTargets()


@dataclass(frozen=True)
class HealthScoreBreakdown:
    """Score of one day: four 0-25 sub-scores and a 0-100 total."""

    day: date
    total_score: int
    protein_score: int
    hydration_score: int
    fiber_score: int
    exercise_score: int


@dataclass(frozen=True)
class WeightEntry:
    """One weigh-in (date-based)."""

    day: date
    weight: float
    unit: WeightUnit = "lbs"


@dataclass(frozen=True)
class DatedValue:
    """Point of a dated numeric series."""

    day: date
    value: float


@dataclass(frozen=True)
class TrendResult:
    """Change over a window of a dated series."""

    change: float
    percent_change: float
    direction: Direction


@dataclass(frozen=True)
class ReportSummary:
    """Summary block of the doctor report for a date range."""

    start: date
    end: date
    total_injections: int
    start_weight: float
    end_weight: float
    weight_change: float
    avg_score: int | None
    current_level: float
    symptom_counts: dict[str, int] = field(default_factory=dict)
    top_symptoms: list[str] = field(default_factory=list)
