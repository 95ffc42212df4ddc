from __future__ import annotations

from typing import Optional, Sequence

from ..model import DeviceExport, ReconciledRecord
from ..periods import CONSOLIDATED_POLICY, PeriodPolicy
from ..reconciliation import CrossDeviceReconciliator
from .base import ReconciliationStrategy


class CrossDeviceStrategy(ReconciliationStrategy):
    """Merge both turnstiles; missing devices or streams are tolerated."""

    def __init__(self, policy: PeriodPolicy = CONSOLIDATED_POLICY):
        super().__init__(policy)

    def reconcile(self, exports: Sequence[Optional[DeviceExport]]) -> list[ReconciledRecord]:
        return CrossDeviceReconciliator(self.policy).reconcile(exports)
