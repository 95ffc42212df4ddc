"""Date and time-of-day normalization for device exports.

Device exports encode dates three ways (ISO strings, ``DD/MM/YYYY`` strings and
spreadsheet serial-day numbers) and times as ``HH:MM:SS``. Everything here
returns ``None`` for input it cannot read; callers drop such rows.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Any, Optional

from ..core.constants import SERIAL_EPOCH, SERIAL_OFFSET_DAYS

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_BR_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def normalize_date(raw: Any) -> Optional[date]:
    if raw is None or isinstance(raw, bool):
        return None

    # datetime first: it is a subclass of date (pandas Timestamp too)
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    if isinstance(raw, numbers.Real):
        return _from_serial(raw)

    if isinstance(raw, str):
        text = raw.strip()
        if _ISO_DATE_RE.match(text):
            try:
                return parse_iso_date(text)
            except ValueError:
                return None

        m = _BR_DATE_RE.match(text)
        if m:
            day, month, year = (int(p) for p in m.groups())
            try:
                return date(year, month, day)
            except ValueError:
                return None

    return None


def _from_serial(serial: numbers.Real) -> Optional[date]:
    if not math.isfinite(serial):
        return None
    try:
        return SERIAL_EPOCH + timedelta(days=math.floor(serial) - SERIAL_OFFSET_DAYS)
    except OverflowError:
        return None


def normalize_time(raw: Any) -> Optional[time]:
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return raw.time().replace(microsecond=0)
    if isinstance(raw, time):
        return raw.replace(microsecond=0, tzinfo=None)

    if not isinstance(raw, str):
        return None

    m = _TIME_RE.match(raw.strip())
    if not m:
        return None
    hours, minutes, seconds = m.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError:
        return None


def minutes_of_day(value: time) -> Fraction:
    """Minutes since midnight; seconds contribute an exact fractional minute."""
    return Fraction(value.hour * 3600 + value.minute * 60 + value.second, 60)


def minutes_between(start: time, end: time) -> int:
    """``end - start`` in whole minutes, rounded half away from zero.

    Negative when ``end`` is earlier than ``start`` (positional pairing can do that).
    """
    delta = minutes_of_day(end) - minutes_of_day(start)
    minutes = Decimal(delta.numerator) / Decimal(delta.denominator)
    return int(minutes.quantize(Decimal(1), rounding=ROUND_HALF_UP))
