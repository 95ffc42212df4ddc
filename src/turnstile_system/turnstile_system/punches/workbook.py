"""Extract punch rows from an uploaded turnstile workbook.

Each export has an "Entrada" and a "Saída" sheet; the first three rows are a
banner and the fourth row is the header (``NOME``, ``DATA``, ``HORA``).
"""

from __future__ import annotations

import zipfile
from typing import IO, Optional, Union

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..core.constants import SHEET_DATE_COLUMN, SHEET_HEADER_ROW, SHEET_NAME_COLUMN, SHEET_TIME_COLUMN
from ..core.exceptions import ValidationError
from .model import DeviceExport, PunchRow


def find_sheet(sheet_names, *needles: str) -> Optional[str]:
    for name in sheet_names:
        lowered = str(name).lower()
        if any(n in lowered for n in needles):
            return name
    return None


def _cell(value):
    # pandas uses NaN/NaT for blanks
    return None if pd.isna(value) else value


def frame_to_rows(frame: pd.DataFrame) -> list[PunchRow]:
    frame = frame.rename(columns=lambda c: str(c).strip().upper())
    frame = frame.loc[:, ~frame.columns.duplicated()]
    missing = {SHEET_NAME_COLUMN, SHEET_DATE_COLUMN, SHEET_TIME_COLUMN} - set(frame.columns)
    if missing:
        return []

    return [
        PunchRow(
            person=_cell(rec[SHEET_NAME_COLUMN]),
            date=_cell(rec[SHEET_DATE_COLUMN]),
            time=_cell(rec[SHEET_TIME_COLUMN]),
        )
        for rec in frame.to_dict(orient="records")
    ]


def sheet_to_rows(raw: pd.DataFrame) -> list[PunchRow]:
    """Rows below the header line of a sheet read with ``header=None``.

    A sheet too short to hold the header is an empty stream, not an error.
    """
    if len(raw.index) <= SHEET_HEADER_ROW:
        return []

    frame = raw.iloc[SHEET_HEADER_ROW + 1 :].copy()
    frame.columns = [_cell(v) for v in raw.iloc[SHEET_HEADER_ROW]]
    return frame_to_rows(frame)


def read_device_export(
    stream: Union[str, bytes, IO[bytes]],
    *,
    source_label: Optional[str],
    device_id: Optional[int],
) -> DeviceExport:
    try:
        sheets = pd.read_excel(stream, sheet_name=None, header=None, engine="openpyxl")
    except (ValueError, OSError, zipfile.BadZipFile, InvalidFileException) as e:
        raise ValidationError(f"Arquivo Excel inválido: {e}") from e

    entry_sheet = find_sheet(sheets.keys(), "entrada")
    exit_sheet = find_sheet(sheets.keys(), "saida", "saída")

    return DeviceExport(
        source_label=source_label,
        device_id=device_id,
        entries=sheet_to_rows(sheets[entry_sheet]) if entry_sheet is not None else None,
        exits=sheet_to_rows(sheets[exit_sheet]) if exit_sheet is not None else None,
    )
