"""CLI: niveles de medicación, tendencias y reporte Excel desde un export."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta
from pathlib import Path

from dateutil import parser as date_parser
from dateutil import tz

from glp1_tool.consolidate import (
    build_report_summary,
    daily_scores_frame,
    injections_to_frame,
    summary_to_frame,
    weights_to_frame,
)
from glp1_tool.excel_writer import ExcelLayout, write_report_xlsx
from glp1_tool.levels import (
    current_level,
    days_since_last_injection,
    level_status,
    next_due_date,
)
from glp1_tool.model import MEDICATION_HALF_LIVES, DecaySettings
from glp1_tool.scoring import recent_average_score, score_band
from glp1_tool.sources.tracker_export import TrackerExportPaths, TrackerExportSource
from glp1_tool.trends import weight_trend

logger = logging.getLogger(__name__)

_DEFAULT_TZ = "America/Argentina/Buenos_Aires"


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Nivel de medicación GLP-1, tendencias y reporte médico."
    )
    parser.add_argument(
        "--base-dir",
        default=str(Path.home() / "proyectos" / "glp1"),
        help="Directorio base (default: ~/proyectos/glp1).",
    )
    parser.add_argument(
        "--export",
        default=None,
        help="Archivo JSON exportado (default: el más reciente en exportes/).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=30,
        help="Rango de días del reporte hacia atrás.",
    )
    parser.add_argument(
        "--interval-days",
        type=int,
        default=7,
        help="Días entre inyecciones para la próxima fecha.",
    )
    parser.add_argument(
        "--medication",
        choices=sorted(MEDICATION_HALF_LIVES),
        default=None,
        help="Usa la vida media predefinida de la medicación.",
    )
    parser.add_argument(
        "--half-life",
        type=float,
        default=None,
        help="Vida media en días (tiene prioridad sobre --medication).",
    )
    parser.add_argument(
        "--now",
        default=None,
        help="Instante de referencia ISO 8601 (default: ahora).",
    )
    parser.add_argument("--tz", default=_DEFAULT_TZ, help="Zona horaria.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def _resolve_settings(
    ns: argparse.Namespace, exported: DecaySettings
) -> DecaySettings:
    if ns.half_life is not None:
        return DecaySettings(half_life_days=ns.half_life)
    if ns.medication is not None:
        return DecaySettings.for_medication(ns.medication)
    return exported


def main() -> int:
    """Run the report CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    zone = tz.gettz(ns.tz)
    if zone is None:
        raise ValueError(f"Unknown time zone: {ns.tz}")
    base = Path(ns.base_dir).expanduser().resolve()

    src = TrackerExportSource(TrackerExportPaths(root=base / "exportes"), zone)
    if ns.export:
        export_file = Path(ns.export).expanduser()
    else:
        src.validate()
        export_file = src.newest_file()
    data = src.load(export_file)
    settings = _resolve_settings(ns, data.settings)
    logger.debug("Half-life: %s days", settings.half_life_days)

    if ns.now:
        now = date_parser.isoparse(ns.now)
        if now.tzinfo is None:
            now = now.replace(tzinfo=zone)
    else:
        now = datetime.now(tz=zone)
    now_ms = int(now.timestamp() * 1000)
    today = now.astimezone(zone).date()

    level = current_level(data.injections, settings, now_ms)
    since = days_since_last_injection(data.injections, now_ms, zone)
    due = next_due_date(data.injections, ns.interval_days, zone)
    trend = weight_trend(data.weights, today, 30, data.weight_unit)
    recent_score = recent_average_score(data.wellness)

    summary = build_report_summary(
        data.injections,
        data.weights,
        data.wellness,
        settings,
        start=today - timedelta(days=ns.days),
        end=today,
        now_ms=now_ms,
        unit=data.weight_unit,
        zone=zone,
    )

    out_dir = base / "salidas"
    ts = now.strftime("%Y-%m-%d_%H-%M-%S")
    out_path = out_dir / f"glp1_reporte_{ts}.xlsx"
    write_report_xlsx(
        summary_to_frame(summary, data.weight_unit),
        injections_to_frame(data.injections, zone),
        weights_to_frame(data.weights, data.weight_unit),
        daily_scores_frame(data.wellness),
        out_path,
        ExcelLayout(),
    )

    print(f"OK: Export file: {export_file}")
    print(f"Nivel actual: {level:.1f}% ({level_status(level)})")
    print(
        "Días desde la última inyección: "
        + ("sin inyecciones" if since is None else str(since))
    )
    print(f"Próxima inyección: {due.isoformat() if due else '-'}")
    if trend is not None:
        print(
            f"Peso 30 días: {trend.change:+.1f} {data.weight_unit} "
            f"({trend.percent_change:+.1f}%, {trend.direction})"
        )
    if recent_score is not None:
        print(f"Puntaje 7 días: {recent_score} ({score_band(recent_score)})")
    print(f"OK: Output: {out_path}")
    return 0
