"""Meal-period classification.

Two boundary policies coexist: the single-device import closes lunch at 14:00,
the consolidated import at 17:50. Time between the lunch cut-off and 18:00
falls into ``Period.OTHER`` under either policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import BREAKFAST_END, CONSOLIDATED_LUNCH_END, DINNER_START, SINGLE_DEVICE_LUNCH_END
from ..core.enums import Period
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PeriodPolicy:
    name: str
    lunch_start: time
    lunch_end: time
    dinner_start: time


SINGLE_DEVICE_POLICY = PeriodPolicy(
    name="single_device",
    lunch_start=BREAKFAST_END,
    lunch_end=SINGLE_DEVICE_LUNCH_END,
    dinner_start=DINNER_START,
)

CONSOLIDATED_POLICY = PeriodPolicy(
    name="consolidated",
    lunch_start=BREAKFAST_END,
    lunch_end=CONSOLIDATED_LUNCH_END,
    dinner_start=DINNER_START,
)

POLICIES = {p.name: p for p in (SINGLE_DEVICE_POLICY, CONSOLIDATED_POLICY)}


def classify(time_of_day: time, policy: PeriodPolicy) -> Period:
    if time_of_day < policy.lunch_start:
        return Period.BREAKFAST
    if time_of_day < policy.lunch_end:
        return Period.LUNCH
    if time_of_day >= policy.dinner_start:
        return Period.DINNER
    return Period.OTHER


def policy_for_name(name: str) -> PeriodPolicy:
    policy = POLICIES.get((name or "").strip().lower())
    if not policy:
        raise ValidationError(f"Política de horário desconhecida: {name!r}")
    return policy
