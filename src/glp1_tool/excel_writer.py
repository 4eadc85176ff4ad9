"""Generación de Excel formateado con el reporte para el médico."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

_HEADER_MAP: dict[str, str] = {
    "item": "Dato",
    "value": "Valor",
    "datetime": "Fecha / Hora",
    "date": "Fecha",
    "dose_mg": "Dosis (mg)",
    "site": "Sitio",
    "symptoms": "Síntomas",
    "notes": "Notas",
    "weight": "Peso",
    "unit": "Unidad",
    "total_score": "Puntaje",
    "protein_score": "Proteína",
    "hydration_score": "Hidratación",
    "fiber_score": "Fibra",
    "exercise_score": "Fuerza",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Dato": 24,
    "Valor": 28,
    "Fecha / Hora": 18,
    "Fecha": 12,
    "Dosis (mg)": 10,
    "Sitio": 24,
    "Síntomas": 36,
    "Notas": 30,
    "Peso": 10,
    "Unidad": 8,
    "Puntaje": 10,
    "Proteína": 10,
    "Hidratación": 12,
    "Fibra": 8,
    "Fuerza": 8,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha / Hora": "dd/mm/yyyy hh:mm",
    "Fecha": "dd/mm/yyyy",
    "Dosis (mg)": "0.00",
    "Peso": "0.0",
    "Puntaje": "0",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the doctor report workbook."""

    summary_sheet: str = "Resumen"
    injections_sheet: str = "Inyecciones"
    weights_sheet: str = "Peso"
    scores_sheet: str = "Puntajes"


def _local_naive(value: object) -> object:
    """Hora local sin timezone; respeta valores vacíos."""
    if value is None or pd.isna(value):
        return value
    ts = pd.Timestamp(value)
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def _drop_timezone(df: pd.DataFrame) -> pd.DataFrame:
    """Excel no admite datetimes con timezone."""
    if "datetime" not in df.columns or df.empty:
        return df
    df = df.copy()
    df["datetime"] = pd.to_datetime(df["datetime"].map(_local_naive))
    return df


def write_report_xlsx(
    summary: pd.DataFrame,
    injections: pd.DataFrame,
    weights: pd.DataFrame,
    scores: pd.DataFrame,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a formatted workbook suitable for printing.

    Args:
        summary: (item, value) rows from ``summary_to_frame``.
        injections: Injection rows from ``injections_to_frame``.
        weights: Weigh-ins from ``weights_to_frame``.
        scores: Score breakdowns from ``daily_scores_frame``.
        out_path: Output path for the XLSX file.
        layout: Sheet names.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = [
        (layout.summary_sheet, summary),
        (layout.injections_sheet, _drop_timezone(injections)),
        (layout.weights_sheet, weights),
        (layout.scores_sheet, scores),
    ]
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for name, df in sheets:
            df.rename(columns=_HEADER_MAP).to_excel(
                writer, index=False, sheet_name=name
            )
            _format_sheet(writer.book[name])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    left = Alignment(horizontal="left", vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = left
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    """Establece anchos de columna para evitar ###."""
    for header, width in _COLUMN_WIDTHS.items():
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    """Aplica formatos numéricos por cabecera."""
    for row in ws.iter_rows(min_row=2):
        for header, fmt in _NUMBER_FORMATS.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
