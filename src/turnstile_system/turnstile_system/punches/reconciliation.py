"""Cross-device reconciliation.

Punches from two independent turnstiles are merged into one stream before
pairing. Device identity is not part of the grouping key: it rides along as
``entry_device``/``exit_device``, so an entry on device 1 may pair with an exit
on device 2. Observations are added after pairing.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Optional

from ..core.constants import OBS_DIFFERENT_DEVICES, OBS_ONLY_ENTRY, OBS_ONLY_EXIT
from ..core.enums import Direction
from .model import DeviceExport, PunchEvent, ReconciledRecord
from .normalizer import to_events
from .pairing import PunchPairingEngine
from .periods import CONSOLIDATED_POLICY, PeriodPolicy


def export_events(export: DeviceExport) -> list[PunchEvent]:
    """Normalized events of both streams of one export; absent streams contribute nothing."""

    events: list[PunchEvent] = []
    for rows, direction in ((export.entries, Direction.ENTRY), (export.exits, Direction.EXIT)):
        if rows is None:
            continue
        events.extend(
            to_events(rows, direction, device_id=export.device_id, source_label=export.source_label)
        )
    return events


class CrossDeviceReconciliator:
    def __init__(self, policy: PeriodPolicy = CONSOLIDATED_POLICY):
        self._engine = PunchPairingEngine(policy)

    @property
    def policy(self) -> PeriodPolicy:
        return self._engine.policy

    def reconcile(self, exports: Iterable[Optional[DeviceExport]]) -> list[ReconciledRecord]:
        events: list[PunchEvent] = []
        labels: list[str] = []
        for export in exports:
            if export is None:
                continue
            export_evs = export_events(export)
            if export_evs and export.source_label and export.source_label not in labels:
                labels.append(export.source_label)
            events.extend(export_evs)

        records = self._engine.pair(events, source_labels=tuple(labels))
        return [dataclasses.replace(r, observation=self.annotate(r)) for r in records]

    @staticmethod
    def annotate(record: ReconciledRecord) -> Optional[str]:
        has_entry = record.entry_time is not None
        has_exit = record.exit_time is not None
        if has_entry and not has_exit:
            return OBS_ONLY_ENTRY
        if has_exit and not has_entry:
            return OBS_ONLY_EXIT
        if has_entry and has_exit and record.entry_device != record.exit_device:
            return OBS_DIFFERENT_DEVICES
        return None
