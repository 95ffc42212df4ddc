from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ReconciledRecord, RecordFilters, StoredPunchRecord


class PunchRecordRepository(Protocol):
    """Repository interface for reconciled punch records.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def save_batch(self, records: Sequence[ReconciledRecord]) -> int:
        """Store the whole batch in one transaction (all or nothing); return rows inserted."""

        raise NotImplementedError

    def list_records(self, filters: RecordFilters) -> Sequence[StoredPunchRecord]:
        raise NotImplementedError

    def period_indicators(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> Sequence[dict]:
        """Rows of ``{period, total, duplicates, avg_minutes, paired}`` for periods that have data."""

        raise NotImplementedError

    def totals(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> dict:
        raise NotImplementedError

    def statistics(self) -> dict:
        raise NotImplementedError

    def delete_records(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> int:
        raise NotImplementedError
