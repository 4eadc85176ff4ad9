"""Lectura de exportaciones JSON del tracker GLP-1."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any

from dateutil import tz

from glp1_tool.model import (
    MEDICATION_HALF_LIVES,
    DailyWellnessEntry,
    DecaySettings,
    InjectionEvent,
    WeightEntry,
    WeightUnit,
)
from glp1_tool.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)

EXPORT_GLOB = "glp1-tracker*.json"
DEFAULT_MEDICATION = "semaglutide"


@dataclass(frozen=True)
class TrackerExportPaths(SourcePaths):
    """Paths for tracker JSON exports."""

    # root: folder containing glp1-tracker*.json


@dataclass(frozen=True)
class TrackerExport:
    """Typed content of one tracker export."""

    injections: list[InjectionEvent] = field(default_factory=list)
    weights: list[WeightEntry] = field(default_factory=list)
    wellness: list[DailyWellnessEntry] = field(default_factory=list)
    settings: DecaySettings = field(
        default_factory=lambda: DecaySettings.for_medication(DEFAULT_MEDICATION)
    )
    medication: str = DEFAULT_MEDICATION
    weight_unit: WeightUnit = "lbs"


class TrackerExportSource(DataSource):
    """Tracker JSON export reading source."""

    def __init__(self, paths: TrackerExportPaths, zone: tzinfo = tz.UTC) -> None:
        """Create the source.

        Args:
            paths: Export folder.
            zone: Time zone of the ``date``/``time`` fields in the export.
        """
        super().__init__(paths)
        self._zone = zone

    def newest_file(self) -> Path:
        """Return newest glp1-tracker*.json by mtime."""
        files = sorted(
            self._paths.root.glob(EXPORT_GLOB),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No {EXPORT_GLOB} in {self._paths.root}")
        return files[0]

    def load(self, path: Path) -> TrackerExport:
        """Parse a tracker export into typed entities.

        Accepts the persisted store shape ``{"state": {...}, "version": N}``
        or the bare state object.

        Raises:
            ValueError: If the JSON root is not an object.
        """
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("Tracker export must be a JSON object")
        state = raw.get("state", raw)
        if not isinstance(state, dict):
            raise ValueError("Tracker export 'state' must be a JSON object")

        unit = _parse_unit(state.get("weightUnit"), "lbs")
        medication, settings = _parse_settings(state.get("medicationSettings"))
        export = TrackerExport(
            injections=_parse_items(
                state.get("injections"), self._item_to_injection
            ),
            weights=_parse_items(
                state.get("weights"), lambda item: _item_to_weight(item, unit)
            ),
            wellness=_parse_items(state.get("muscleEntries"), _item_to_wellness),
            settings=settings,
            medication=medication,
            weight_unit=unit,
        )
        logger.info(
            "Loaded %s: %d injections, %d weights, %d wellness entries",
            path.name,
            len(export.injections),
            len(export.weights),
            len(export.wellness),
        )
        return export

    def _item_to_injection(self, item: dict[str, Any]) -> InjectionEvent | None:
        ts = _parse_epoch_ms(
            item.get("timestamp"), item.get("date"), item.get("time"), self._zone
        )
        if ts is None:
            return None
        symptoms = item.get("symptoms") or []
        return InjectionEvent(
            occurred_at_ms=ts,
            dose_mg=_optional_float(item.get("dosage")),
            site=_optional_str(item.get("site")),
            symptoms=tuple(str(s) for s in symptoms if isinstance(s, str)),
            notes=_optional_str(item.get("notes")),
        )


def _parse_items(
    items: Any, convert: Callable[[dict[str, Any]], Any | None]
) -> list[Any]:
    """Convert a JSON list with ``convert``, skipping invalid items."""
    if not isinstance(items, list):
        return []
    out = []
    for item in items:
        parsed = convert(item) if isinstance(item, dict) else None
        if parsed is None:
            logger.debug("Skipping invalid export item: %r", item)
            continue
        out.append(parsed)
    return out


def _parse_epoch_ms(
    timestamp: Any, day: Any, time_str: Any, zone: tzinfo
) -> int | None:
    """Epoch ms from ``timestamp`` or from ``date`` + ``time`` (HH:MM)."""
    if isinstance(timestamp, int | float) and not isinstance(timestamp, bool):
        return int(timestamp)
    if not isinstance(day, str) or not day.strip():
        return None
    hhmm = time_str.strip() if isinstance(time_str, str) else ""
    text = f"{day.strip()} {hhmm or '00:00'}"
    try:
        dt = datetime.strptime(text, "%Y-%m-%d %H:%M")
    except ValueError:
        return None
    return int(dt.replace(tzinfo=zone).timestamp() * 1000)


def _parse_date(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def _parse_unit(value: Any, default: WeightUnit) -> WeightUnit:
    if value == "kg":
        return "kg"
    if value == "lbs":
        return "lbs"
    return default


def _item_to_weight(
    item: dict[str, Any], default_unit: WeightUnit
) -> WeightEntry | None:
    day = _parse_date(item.get("date"))
    weight = _optional_float(item.get("weight"))
    if day is None or weight is None or weight <= 0:
        return None
    return WeightEntry(
        day=day, weight=weight, unit=_parse_unit(item.get("unit"), default_unit)
    )


def _item_to_wellness(item: dict[str, Any]) -> DailyWellnessEntry | None:
    day = _parse_date(item.get("date"))
    if day is None:
        return None
    protein = _optional_float(item.get("proteinGrams")) or 0.0
    water = _optional_float(item.get("waterOz")) or 0.0
    fiber = _optional_float(item.get("fiberGrams")) or 0.0
    minutes = _optional_float(item.get("strengthMinutes"))
    # The scorer rejects negative amounts; such a day is an invalid item.
    if min(protein, water, fiber, minutes or 0.0) < 0:
        return None
    exercises = item.get("exercises") or []
    return DailyWellnessEntry(
        day=day,
        protein_grams=protein,
        water_oz=water,
        fiber_grams=fiber,
        strength_training=bool(item.get("strengthTraining")),
        strength_minutes=minutes,
        exercises=tuple(str(e) for e in exercises if isinstance(e, str)),
    )


def _parse_settings(raw: Any) -> tuple[str, DecaySettings]:
    """Medication name and decay settings; falls back to the preset half-life."""
    if not isinstance(raw, dict):
        return DEFAULT_MEDICATION, DecaySettings.for_medication(DEFAULT_MEDICATION)
    medication = raw.get("medicationType")
    if medication not in MEDICATION_HALF_LIVES:
        medication = DEFAULT_MEDICATION
    half_life = _optional_float(raw.get("halfLifeDays"))
    if half_life is None or half_life <= 0:
        return medication, DecaySettings.for_medication(medication)
    return medication, DecaySettings(half_life_days=half_life)
