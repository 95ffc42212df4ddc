from __future__ import annotations

from datetime import time

from src.turnstile_system.turnstile_system.core.enums import Period
from src.turnstile_system.turnstile_system.punches.model import DeviceExport, PunchRow
from src.turnstile_system.turnstile_system.punches.reconciliation import CrossDeviceReconciliator
from support import rows


def test_entry_and_exit_on_different_devices(work_day):
    device1 = DeviceExport("catraca1.xlsx", 1, entries=rows("Ana", work_day, "12:00:00"), exits=[])
    device2 = DeviceExport("catraca2.xlsx", 2, entries=[], exits=rows("Ana", work_day, "12:30:00"))

    (record,) = CrossDeviceReconciliator().reconcile([device1, device2])

    assert record.period == Period.LUNCH
    assert record.entry_device == 1
    assert record.exit_device == 2
    assert record.duration_minutes == 30
    assert record.observation == "entrada e saída em catracas diferentes"
    assert record.source_labels == ("catraca1.xlsx", "catraca2.xlsx")


def test_only_exit_recorded(work_day):
    device1 = DeviceExport("catraca1.xlsx", 1, entries=[], exits=rows("Ana", work_day, "09:00:00"))

    (record,) = CrossDeviceReconciliator().reconcile([device1, None])

    assert record.entry_time is None
    assert record.exit_time == time(9, 0)
    assert record.duration_minutes is None
    assert record.observation == "only exit recorded"


def test_only_entry_recorded(work_day):
    device2 = DeviceExport("catraca2.xlsx", 2, entries=rows("Ana", work_day, "19:00:00"), exits=None)

    (record,) = CrossDeviceReconciliator().reconcile([None, device2])

    assert record.exit_time is None
    assert record.entry_device == 2
    assert record.observation == "only entry recorded"


def test_same_device_pair_has_no_observation(work_day):
    device1 = DeviceExport(
        "catraca1.xlsx",
        1,
        entries=rows("Ana", work_day, "08:00:00"),
        exits=rows("Ana", work_day, "08:20:00"),
    )

    (record,) = CrossDeviceReconciliator().reconcile([device1])

    assert record.observation is None
    assert record.is_duplicate is False


def test_labels_cover_all_contributing_files_even_if_record_uses_one(work_day):
    device1 = DeviceExport("catraca1.xlsx", 1, entries=rows("Ana", work_day, "08:00:00"), exits=[])
    device2 = DeviceExport("catraca2.xlsx", 2, entries=[], exits=rows("Bruno", work_day, "19:00:00"))

    records = CrossDeviceReconciliator().reconcile([device1, device2])

    assert {r.person for r in records} == {"Ana", "Bruno"}
    assert all(r.source_labels == ("catraca1.xlsx", "catraca2.xlsx") for r in records)


def test_file_without_valid_rows_does_not_contribute_a_label(work_day):
    device1 = DeviceExport("catraca1.xlsx", 1, entries=rows("Ana", work_day, "08:00:00"), exits=[])
    device2 = DeviceExport("vazio.xlsx", 2, entries=[PunchRow(person="", date=work_day, time="08:10:00")], exits=[])

    (record,) = CrossDeviceReconciliator().reconcile([device1, device2])

    assert record.source_labels == ("catraca1.xlsx",)


def test_missing_devices_are_tolerated():
    assert CrossDeviceReconciliator().reconcile([None, None]) == []
    assert CrossDeviceReconciliator().reconcile([DeviceExport("x.xlsx", 1)]) == []


def test_duplicates_across_devices_in_one_period(work_day):
    device1 = DeviceExport(
        "catraca1.xlsx",
        1,
        entries=rows("Ana", work_day, "12:00:00", "12:02:00"),
        exits=rows("Ana", work_day, "12:40:00"),
    )
    device2 = DeviceExport("catraca2.xlsx", 2, entries=[], exits=rows("Ana", work_day, "12:45:00"))

    first, second = CrossDeviceReconciliator().reconcile([device1, device2])

    assert (first.entry_device, first.exit_device, first.is_duplicate) == (1, 1, False)
    assert first.observation is None
    assert (second.entry_device, second.exit_device, second.is_duplicate) == (1, 2, True)
    assert second.observation == "entrada e saída em catracas diferentes"


def test_consolidated_policy_is_the_default(work_day):
    device1 = DeviceExport("c1", 1, entries=rows("Ana", work_day, "15:00:00"), exits=rows("Ana", work_day, "15:20:00"))

    (record,) = CrossDeviceReconciliator().reconcile([device1])

    assert record.period == Period.LUNCH


def test_malformed_rows_are_skipped(work_day):
    device1 = DeviceExport(
        "c1",
        1,
        entries=[
            PunchRow(person="  Ana  ", date="05/03/2024", time="08:00:00"),
            PunchRow(person=None, date="05/03/2024", time="08:01:00"),
            PunchRow(person="Ana", date="data ruim", time="08:02:00"),
            PunchRow(person="Ana", date="05/03/2024", time=None),
        ],
        exits=[],
    )

    (record,) = CrossDeviceReconciliator().reconcile([device1])

    assert record.person == "Ana"
    assert record.date == work_day
