"""Grouping and positional pairing of punch events.

Events are partitioned by ``(person, date, period)``. Inside a group entries
and exits are sorted independently (stable, by time of day) and paired by
index: ``entries[i]`` with ``exits[i]``. This is not nearest-neighbour matching;
with irregular counts an early entry can be paired with a later, unrelated
exit. Duplicate flags depend on this exact indexing, so keep it positional.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.enums import Direction
from .model import GroupKey, PunchEvent, ReconciledRecord
from .periods import SINGLE_DEVICE_POLICY, PeriodPolicy, classify


@dataclass
class _PunchGroup:
    entries: list[PunchEvent] = field(default_factory=list)
    exits: list[PunchEvent] = field(default_factory=list)


def group_events(events: Iterable[PunchEvent], policy: PeriodPolicy) -> dict[GroupKey, _PunchGroup]:
    groups: dict[GroupKey, _PunchGroup] = {}
    for event in events:
        key = GroupKey(event.person, event.date, classify(event.time_of_day, policy))
        group = groups.setdefault(key, _PunchGroup())
        if event.direction == Direction.ENTRY:
            group.entries.append(event)
        else:
            group.exits.append(event)
    return groups


def pair_group(
    key: GroupKey,
    entries: list[PunchEvent],
    exits: list[PunchEvent],
    *,
    source_labels: tuple[str, ...] = (),
) -> list[ReconciledRecord]:
    entries = sorted(entries, key=lambda e: e.time_of_day)
    exits = sorted(exits, key=lambda e: e.time_of_day)

    records: list[ReconciledRecord] = []
    for i in range(max(len(entries), len(exits))):
        entry: Optional[PunchEvent] = entries[i] if i < len(entries) else None
        exit_: Optional[PunchEvent] = exits[i] if i < len(exits) else None

        labels = source_labels or _labels_of(entry, exit_)
        records.append(
            ReconciledRecord(
                person=key.person,
                date=key.date,
                period=key.period,
                entry_time=entry.time_of_day if entry else None,
                exit_time=exit_.time_of_day if exit_ else None,
                entry_device=entry.device_id if entry else None,
                exit_device=exit_.device_id if exit_ else None,
                is_duplicate=i > 0,
                source_labels=labels,
                pair_index=i,
            )
        )
    return records


def _labels_of(*events: Optional[PunchEvent]) -> tuple[str, ...]:
    labels: list[str] = []
    for e in events:
        if e is not None and e.source_label and e.source_label not in labels:
            labels.append(e.source_label)
    return tuple(labels)


def pair_punches(
    events: Iterable[PunchEvent],
    policy: PeriodPolicy = SINGLE_DEVICE_POLICY,
    *,
    source_labels: tuple[str, ...] = (),
) -> list[ReconciledRecord]:
    """Turn a flat sequence of events into reconciled records.

    Groups come out ordered by date, person and period; records inside a group
    by pairing index. When ``source_labels`` is given every record carries it,
    otherwise each record carries the labels of its own events.
    """

    groups = group_events(events, policy)
    records: list[ReconciledRecord] = []
    for key in sorted(groups, key=GroupKey.sort_key):
        group = groups[key]
        records.extend(pair_group(key, group.entries, group.exits, source_labels=source_labels))
    return records


class PunchPairingEngine:
    """Pairing engine bound to one period policy."""

    def __init__(self, policy: PeriodPolicy = SINGLE_DEVICE_POLICY):
        self._policy = policy

    @property
    def policy(self) -> PeriodPolicy:
        return self._policy

    def pair(self, events: Iterable[PunchEvent], *, source_labels: tuple[str, ...] = ()) -> list[ReconciledRecord]:
        return pair_punches(events, self._policy, source_labels=source_labels)
