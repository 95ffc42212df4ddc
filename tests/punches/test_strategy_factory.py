import pytest

from src.turnstile_system.turnstile_system.core.enums import Period, ReconciliationMode
from src.turnstile_system.turnstile_system.core.exceptions import MissingSourceStreamError, ValidationError
from src.turnstile_system.turnstile_system.punches.factory import ReconciliationStrategyFactory
from src.turnstile_system.turnstile_system.punches.model import DeviceExport
from src.turnstile_system.turnstile_system.punches.periods import CONSOLIDATED_POLICY, SINGLE_DEVICE_POLICY
from src.turnstile_system.turnstile_system.punches.strategies.cross_device_strategy import CrossDeviceStrategy
from src.turnstile_system.turnstile_system.punches.strategies.single_device_strategy import SingleDeviceStrategy
from support import rows


def test_factory_picks_strategy_and_policy_by_mode():
    factory = ReconciliationStrategyFactory()

    single = factory.for_mode(ReconciliationMode.SINGLE_DEVICE)
    cross = factory.for_mode(ReconciliationMode.CROSS_DEVICE)

    assert isinstance(single, SingleDeviceStrategy)
    assert single.policy is SINGLE_DEVICE_POLICY
    assert isinstance(cross, CrossDeviceStrategy)
    assert cross.policy is CONSOLIDATED_POLICY


def test_factory_policy_override():
    factory = ReconciliationStrategyFactory(single_policy=CONSOLIDATED_POLICY)
    assert factory.for_mode(ReconciliationMode.SINGLE_DEVICE).policy is CONSOLIDATED_POLICY


def test_single_device_requires_both_streams(work_day):
    export = DeviceExport("c1.xlsx", 1, entries=rows("Ana", work_day, "08:00:00"), exits=None)

    with pytest.raises(MissingSourceStreamError):
        SingleDeviceStrategy().reconcile([export])


def test_single_device_accepts_an_empty_but_present_stream(work_day):
    export = DeviceExport("c1.xlsx", 1, entries=rows("Ana", work_day, "08:00:00"), exits=[])

    (record,) = SingleDeviceStrategy().reconcile([export])

    assert record.exit_time is None
    assert record.observation is None
    assert record.entry_device == 1
    assert record.source_labels == ("c1.xlsx",)


def test_single_device_takes_exactly_one_export(work_day):
    export = DeviceExport("c1.xlsx", 1, entries=[], exits=[])
    with pytest.raises(ValidationError):
        SingleDeviceStrategy().reconcile([export, export])
    with pytest.raises(ValidationError):
        SingleDeviceStrategy().reconcile([None])


def test_single_device_uses_the_14h_lunch_cutoff(work_day):
    export = DeviceExport(
        "c1.xlsx",
        2,
        entries=rows("Ana", work_day, "14:10:00"),
        exits=rows("Ana", work_day, "14:40:00"),
    )

    (record,) = SingleDeviceStrategy().reconcile([export])

    assert record.period == Period.OTHER
    assert record.duration_minutes == 30
    assert (record.entry_device, record.exit_device) == (2, 2)
