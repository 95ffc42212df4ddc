from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ReconciliationMode
from ..core.exceptions import ValidationError
from .periods import CONSOLIDATED_POLICY, SINGLE_DEVICE_POLICY, PeriodPolicy
from .strategies.base import ReconciliationStrategy
from .strategies.cross_device_strategy import CrossDeviceStrategy
from .strategies.single_device_strategy import SingleDeviceStrategy


@dataclass
class ReconciliationStrategyFactory:
    """Factory Pattern: pick the strategy (and its period policy) for a run."""

    single_policy: PeriodPolicy = SINGLE_DEVICE_POLICY
    consolidated_policy: PeriodPolicy = CONSOLIDATED_POLICY

    def for_mode(self, mode: ReconciliationMode, *, policy: Optional[PeriodPolicy] = None) -> ReconciliationStrategy:
        if mode == ReconciliationMode.SINGLE_DEVICE:
            return SingleDeviceStrategy(policy or self.single_policy)
        if mode == ReconciliationMode.CROSS_DEVICE:
            return CrossDeviceStrategy(policy or self.consolidated_policy)
        raise ValidationError(f"Modo de conciliação desconhecido: {mode!r}")
