from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..model import DeviceExport, ReconciledRecord
from ..periods import PeriodPolicy


class ReconciliationStrategy(ABC):
    """Strategy Pattern: encapsulate how a batch of device exports becomes records."""

    def __init__(self, policy: PeriodPolicy):
        self.policy = policy

    @abstractmethod
    def reconcile(self, exports: Sequence[Optional[DeviceExport]]) -> list[ReconciledRecord]:
        raise NotImplementedError
