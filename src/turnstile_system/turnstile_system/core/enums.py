from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    USER = "user"


class Direction(str, Enum):
    """Punch direction, taken from the sheet or stream it came from."""

    ENTRY = "entrada"
    EXIT = "saida"


class Period(str, Enum):
    """Meal period. The value is the persisted literal."""

    BREAKFAST = "cafe"
    LUNCH = "almoco"
    DINNER = "janta"
    OTHER = "outro"

    @property
    def rank(self) -> int:
        return _PERIOD_ORDER.index(self)


_PERIOD_ORDER = (Period.BREAKFAST, Period.LUNCH, Period.DINNER, Period.OTHER)


class ReconciliationMode(str, Enum):
    SINGLE_DEVICE = "single_device"
    CROSS_DEVICE = "cross_device"
