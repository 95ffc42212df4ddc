from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, NamedTuple, Optional, Sequence

from ..common.datetime_utils import minutes_between
from ..core.constants import SOURCE_LABEL_SEPARATOR
from ..core.enums import Direction, Period


@dataclass(frozen=True)
class PunchRow:
    """Raw row taken from a turnstile sheet; values are not normalized yet."""

    person: Any
    date: Any
    time: Any
    device_id: Optional[int] = None


@dataclass(frozen=True)
class DeviceExport:
    """One device's export: its entry and exit streams.

    A stream of ``None`` means the stream (sheet) is absent altogether; an empty
    sequence means it is present but has no rows.
    """

    source_label: Optional[str]
    device_id: Optional[int]
    entries: Optional[Sequence[PunchRow]] = None
    exits: Optional[Sequence[PunchRow]] = None


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one observed swipe, already normalized."""

    person: str
    date: date
    time_of_day: time
    direction: Direction
    device_id: Optional[int] = None
    source_label: Optional[str] = None


class GroupKey(NamedTuple):
    person: str
    date: date
    period: Period

    def sort_key(self) -> tuple:
        return (self.date, self.person, self.period.rank)


@dataclass(frozen=True)
class ReconciledRecord:
    """One attendance pairing inside a ``(person, date, period)`` group."""

    person: str
    date: date
    period: Period
    entry_time: Optional[time]
    exit_time: Optional[time]
    entry_device: Optional[int] = None
    exit_device: Optional[int] = None
    is_duplicate: bool = False
    observation: Optional[str] = None
    source_labels: tuple[str, ...] = field(default_factory=tuple)
    pair_index: int = 0

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.entry_time is None or self.exit_time is None:
            return None
        return minutes_between(self.entry_time, self.exit_time)

    @property
    def is_paired(self) -> bool:
        return self.entry_time is not None and self.exit_time is not None

    @property
    def key(self) -> GroupKey:
        return GroupKey(self.person, self.date, self.period)

    def to_row(self) -> dict:
        """Flat view handed to the persistence layer."""
        return {
            "person_name": self.person,
            "work_date": self.date,
            "entry_time": self.entry_time,
            "exit_time": self.exit_time,
            "duration_minutes": self.duration_minutes,
            "entry_device": self.entry_device,
            "exit_device": self.exit_device,
            "period": self.period.value,
            "is_duplicate": self.is_duplicate,
            "source_labels": SOURCE_LABEL_SEPARATOR.join(self.source_labels) or None,
            "observation": self.observation,
        }


@dataclass(frozen=True)
class StoredPunchRecord:
    """Read-model of a persisted ``punch_records`` row."""

    record_id: int
    person: str
    date: date
    period: Period
    entry_time: Optional[time]
    exit_time: Optional[time]
    duration_minutes: Optional[int]
    entry_device: Optional[int]
    exit_device: Optional[int]
    is_duplicate: bool
    source_labels: Optional[str] = None
    observation: Optional[str] = None


@dataclass(frozen=True)
class RecordFilters:
    """Listing filters. An exact ``date`` wins over the range."""

    name: Optional[str] = None
    date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    period: Optional[Period] = None
    duplicates: Optional[bool] = None
    device_id: Optional[int] = None
