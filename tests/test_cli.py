"""Tests for CLI entrypoints."""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from openpyxl import load_workbook

from glp1_tool import cli


def _args(base_dir: Path, **overrides: Any) -> argparse.Namespace:
    values: dict[str, Any] = {
        "base_dir": str(base_dir),
        "export": None,
        "days": 30,
        "interval_days": 7,
        "medication": None,
        "half_life": None,
        "now": "2026-01-15T12:00:00+00:00",
        "tz": "UTC",
        "verbose": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def _write_export(base_dir: Path, **extra: list[dict[str, Any]]) -> Path:
    export_dir = base_dir / "exportes"
    export_dir.mkdir(parents=True)
    state: dict[str, Any] = {
        "injections": [
            {
                "date": "2026-01-08",
                "time": "12:00",
                "site": "Thigh (Left)",
                "dosage": 0.5,
                "symptoms": ["Nausea"],
            }
        ],
        "weights": [
            {"date": "2026-01-01", "weight": 230.0, "unit": "lbs"},
            {"date": "2026-01-14", "weight": 226.0, "unit": "lbs"},
        ],
        "muscleEntries": [
            {
                "date": "2026-01-14",
                "proteinGrams": 100,
                "waterOz": 64,
                "fiberGrams": 30,
                "strengthTraining": True,
                "strengthMinutes": 30,
            }
        ],
        "medicationSettings": {"medicationType": "semaglutide", "halfLifeDays": 7},
        "weightUnit": "lbs",
    }
    for key, items in extra.items():
        state[key] = state[key] + items
    path = export_dir / "glp1-tracker-2026-01-15.json"
    path.write_text(json.dumps({"state": state, "version": 0}), encoding="utf-8")
    return path


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        ["prog", "--base-dir", "/tmp/base", "--days", "10", "--half-life", "5"],
    )
    ns = cli.parse_args()
    assert ns.base_dir == "/tmp/base"
    assert ns.days == 10
    assert ns.half_life == 5.0
    assert ns.interval_days == 7
    assert ns.medication is None


def test_main_happy_path(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_export(tmp_path)
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path))

    code = cli.main()
    assert code == 0

    out = capsys.readouterr().out
    assert "Nivel actual: 50.0% (moderate)" in out
    assert "Días desde la última inyección: 7" in out
    assert "Próxima inyección: 2026-01-15" in out
    assert "Peso 30 días: -4.0 lbs" in out
    assert "Puntaje 7 días: 100 (excellent)" in out

    reports = list((tmp_path / "salidas").glob("glp1_reporte_*.xlsx"))
    assert len(reports) == 1
    assert reports[0].name == "glp1_reporte_2026-01-15_12-00-00.xlsx"
    wb = load_workbook(reports[0])
    assert "Resumen" in wb.sheetnames


def test_main_skips_out_of_range_export_items(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_export(
        tmp_path,
        weights=[{"date": "2025-12-31", "weight": 0, "unit": "lbs"}],
        muscleEntries=[{"date": "2026-01-13", "proteinGrams": -5}],
    )
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path))

    assert cli.main() == 0

    out = capsys.readouterr().out
    assert "Peso 30 días: -4.0 lbs" in out
    assert "Puntaje 7 días: 100 (excellent)" in out
    assert len(list((tmp_path / "salidas").glob("glp1_reporte_*.xlsx"))) == 1


def test_main_half_life_override(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    export = _write_export(tmp_path)
    monkeypatch.setattr(
        cli,
        "parse_args",
        lambda: _args(tmp_path, export=str(export), half_life=3.5),
    )
    assert cli.main() == 0
    assert "Nivel actual: 25.0% (low)" in capsys.readouterr().out


def test_main_uses_clock_when_now_missing(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _write_export(tmp_path)

    class _FixedDatetime(datetime):
        @classmethod
        def now(cls, tz: Any | None = None) -> _FixedDatetime:
            return cls(2026, 1, 15, 12, 0, 0, tzinfo=tz)

    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path, now=None))
    monkeypatch.setattr(cli, "datetime", _FixedDatetime)

    assert cli.main() == 0
    assert (tmp_path / "salidas" / "glp1_reporte_2026-01-15_12-00-00.xlsx").exists()


def test_main_propagates_validation_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path))
    with pytest.raises(FileNotFoundError):
        cli.main()


def test_main_unknown_time_zone(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        cli, "parse_args", lambda: _args(tmp_path, tz="Mars/Olympus_Mons")
    )
    with pytest.raises(ValueError, match="Unknown time zone"):
        cli.main()
