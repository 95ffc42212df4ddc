from __future__ import annotations

from typing import Optional, Sequence

from ...core.enums import Direction
from ...core.exceptions import MissingSourceStreamError, ValidationError
from ..model import DeviceExport, ReconciledRecord
from ..normalizer import to_events
from ..pairing import PunchPairingEngine
from ..periods import SINGLE_DEVICE_POLICY, PeriodPolicy
from .base import ReconciliationStrategy


class SingleDeviceStrategy(ReconciliationStrategy):
    """One turnstile, both streams required, no cross-device observations."""

    def __init__(self, policy: PeriodPolicy = SINGLE_DEVICE_POLICY):
        super().__init__(policy)

    def reconcile(self, exports: Sequence[Optional[DeviceExport]]) -> list[ReconciledRecord]:
        present = [e for e in exports if e is not None]
        if len(present) != 1:
            raise ValidationError("A importação individual aceita exatamente um arquivo")
        export = present[0]

        if export.entries is None or export.exits is None:
            raise MissingSourceStreamError("Planilhas de Entrada e/ou Saída não encontradas")

        events = to_events(
            export.entries, Direction.ENTRY, device_id=export.device_id, source_label=export.source_label
        ) + to_events(export.exits, Direction.EXIT, device_id=export.device_id, source_label=export.source_label)

        labels = (export.source_label,) if export.source_label else ()
        return PunchPairingEngine(self.policy).pair(events, source_labels=labels)
