from __future__ import annotations

import io
from datetime import date, datetime, time

import pytest

from src.turnstile_system.turnstile_system.core.exceptions import ValidationError
from src.turnstile_system.turnstile_system.punches.strategies.single_device_strategy import SingleDeviceStrategy
from src.turnstile_system.turnstile_system.punches.workbook import find_sheet, read_device_export
from support import workbook_bytes


def test_reads_entry_and_exit_sheets():
    data = workbook_bytes(
        {
            "Entrada": [
                {"NOME": " Ana ", "DATA": "05/03/2024", "HORA": "08:01:00"},
                {"NOME": None, "DATA": "05/03/2024", "HORA": "08:02:00"},
            ],
            "Saída": [{"NOME": "Ana", "DATA": datetime(2024, 3, 5), "HORA": time(8, 15, 0)}],
        }
    )

    export = read_device_export(io.BytesIO(data), source_label="catraca1.xlsx", device_id=1)

    assert export.source_label == "catraca1.xlsx"
    assert len(export.entries) == 2
    assert len(export.exits) == 1

    (record,) = SingleDeviceStrategy().reconcile([export])
    assert record.person == "Ana"
    assert record.date == date(2024, 3, 5)
    assert record.duration_minutes == 14


def test_absent_sheet_is_an_absent_stream():
    data = workbook_bytes({"Entrada": [{"NOME": "Ana", "DATA": "2024-03-05", "HORA": "08:00:00"}]})

    export = read_device_export(io.BytesIO(data), source_label="c1.xlsx", device_id=1)

    assert export.entries is not None
    assert export.exits is None


def test_sheet_names_match_case_and_accent_insensitively():
    assert find_sheet(["Resumo", "ENTRADA catraca"], "entrada") == "ENTRADA catraca"
    assert find_sheet(["Saida"], "saida", "saída") == "Saida"
    assert find_sheet(["saída"], "saida", "saída") == "saída"
    assert find_sheet(["Resumo"], "entrada") is None


def test_not_a_workbook():
    with pytest.raises(ValidationError):
        read_device_export(io.BytesIO(b"not an excel file"), source_label="x.xlsx", device_id=1)


def test_banner_only_sheet_is_an_empty_stream():
    data = workbook_bytes(
        {
            "Entrada": [{"NOME": "Ana", "DATA": "05/03/2024", "HORA": "12:00:00"}],
            "Saída": None,
        }
    )

    export = read_device_export(io.BytesIO(data), source_label="c1.xlsx", device_id=1)

    assert len(export.entries) == 1
    assert export.exits == []

    (record,) = SingleDeviceStrategy().reconcile([export])
    assert record.exit_time is None
    assert record.observation is None


def test_header_without_data_rows_is_an_empty_stream():
    data = workbook_bytes({"Entrada": [], "Saída": []})

    export = read_device_export(io.BytesIO(data), source_label="c1.xlsx", device_id=1)

    assert export.entries == []
    assert export.exits == []


def test_legacy_xls_payload_is_rejected_as_invalid():
    ole2_header = bytes.fromhex("d0cf11e0a1b11ae1") + b"\x00" * 504

    with pytest.raises(ValidationError):
        read_device_export(io.BytesIO(ole2_header), source_label="c1.xls", device_id=1)
