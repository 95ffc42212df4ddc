from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..common.datetime_utils import normalize_date, normalize_time
from ..core.enums import Direction
from .model import PunchEvent, PunchRow

logger = logging.getLogger(__name__)


def to_event(
    row: PunchRow,
    direction: Direction,
    *,
    device_id: Optional[int] = None,
    source_label: Optional[str] = None,
) -> Optional[PunchEvent]:
    """Normalize one raw row, or return None if person, date or time is unusable."""

    person = row.person.strip() if isinstance(row.person, str) else ""
    if not person:
        return None

    work_date = normalize_date(row.date)
    time_of_day = normalize_time(row.time)
    if work_date is None or time_of_day is None:
        return None

    return PunchEvent(
        person=person,
        date=work_date,
        time_of_day=time_of_day,
        direction=direction,
        device_id=row.device_id if row.device_id is not None else device_id,
        source_label=source_label,
    )


def to_events(
    rows: Iterable[PunchRow],
    direction: Direction,
    *,
    device_id: Optional[int] = None,
    source_label: Optional[str] = None,
) -> list[PunchEvent]:
    events: list[PunchEvent] = []
    dropped = 0
    for row in rows:
        event = to_event(row, direction, device_id=device_id, source_label=source_label)
        if event is None:
            dropped += 1
            continue
        events.append(event)

    if dropped:
        logger.debug("Dropped %d malformed %s rows from %s", dropped, direction.value, source_label)
    return events
