from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_device_id
from ..core.enums import Period, ReconciliationMode
from ..core.exceptions import ValidationError
from .factory import ReconciliationStrategyFactory
from .model import DeviceExport, ReconciledRecord, RecordFilters, StoredPunchRecord
from .repository import PunchRecordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSummary:
    total: int
    paired: int
    duplicates: int
    files: dict = field(default_factory=dict)


def summarize(records: Sequence[ReconciledRecord], *, files: Optional[dict] = None) -> ImportSummary:
    return ImportSummary(
        total=len(records),
        paired=sum(1 for r in records if r.is_paired),
        duplicates=sum(1 for r in records if r.is_duplicate),
        files=dict(files or {}),
    )


class PunchImportService:
    """Use case: reconcile uploaded device exports and store the batch."""

    def __init__(
        self,
        records: PunchRecordRepository,
        *,
        strategy_factory: ReconciliationStrategyFactory | None = None,
    ):
        self._records = records
        self._factory = strategy_factory or ReconciliationStrategyFactory()

    def import_single(self, export: DeviceExport, *, device_id) -> ImportSummary:
        device_id = require_device_id(device_id)
        if export.device_id != device_id:
            export = DeviceExport(
                source_label=export.source_label,
                device_id=device_id,
                entries=export.entries,
                exits=export.exits,
            )

        strategy = self._factory.for_mode(ReconciliationMode.SINGLE_DEVICE)
        records = strategy.reconcile([export])
        return self._store(records, files={f"catraca{device_id}": export.source_label})

    def import_consolidated(
        self,
        device1: Optional[DeviceExport],
        device2: Optional[DeviceExport],
    ) -> ImportSummary:
        if device1 is None and device2 is None:
            raise ValidationError("É necessário pelo menos um arquivo")

        strategy = self._factory.for_mode(ReconciliationMode.CROSS_DEVICE)
        records = strategy.reconcile([device1, device2])
        files = {
            "catraca1": device1.source_label if device1 else None,
            "catraca2": device2.source_label if device2 else None,
        }
        return self._store(records, files=files)

    def _store(self, records: list[ReconciledRecord], *, files: dict) -> ImportSummary:
        if not records:
            raise ValidationError("Nenhum registro encontrado no arquivo")

        summary = summarize(records, files=files)
        self._records.save_batch(records)
        logger.info(
            "Imported %d records (paired=%d, duplicates=%d) from %s",
            summary.total,
            summary.paired,
            summary.duplicates,
            ", ".join(f for f in files.values() if f) or "-",
        )
        return summary


class PunchQueryService:
    """Use case: list, aggregate and delete stored punch records."""

    def __init__(self, records: PunchRecordRepository):
        self._records = records

    def list_records(self, filters: RecordFilters) -> Sequence[StoredPunchRecord]:
        return self._records.list_records(filters)

    def indicators(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> dict:
        by_period = {p.value: {"total": 0, "duplicates": 0, "avg_minutes": 0, "paired": 0} for p in Period}

        for row in self._records.period_indicators(work_date=work_date, device_id=device_id):
            avg = row.get("avg_minutes")
            by_period[Period(row["period"]).value] = {
                "total": int(row["total"]),
                "duplicates": int(row["duplicates"]),
                "avg_minutes": int(round(avg)) if avg is not None else 0,
                "paired": int(row["paired"]),
            }

        return {
            "indicators": by_period,
            "overall": self._records.totals(work_date=work_date, device_id=device_id),
        }

    def statistics(self) -> dict:
        return self._records.statistics()

    def delete_records(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> int:
        if work_date is None and device_id is None:
            raise ValidationError("É necessário informar pelo menos data ou catraca_id")

        deleted = self._records.delete_records(work_date=work_date, device_id=device_id)
        logger.info("Deleted %d punch records (date=%s, device=%s)", deleted, work_date, device_id)
        return deleted
