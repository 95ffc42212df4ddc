from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.enums import Period
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_int,
    contains_pattern,
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_time,
    where_clause,
)
from .model import ReconciledRecord, RecordFilters, StoredPunchRecord
from .repository import PunchRecordRepository

logger = logging.getLogger(__name__)

_INSERT_SQL = """
    INSERT INTO punch_records
    (person_name, work_date, entry_time, exit_time, duration_minutes,
     entry_device, exit_device, period, is_duplicate, source_labels, observation)
    VALUES (%(person_name)s, %(work_date)s, %(entry_time)s, %(exit_time)s, %(duration_minutes)s,
            %(entry_device)s, %(exit_device)s, %(period)s, %(is_duplicate)s, %(source_labels)s, %(observation)s)
"""


def _device_clause(device_id: int, clauses: list[str], params: list[object]) -> None:
    clauses.append("(entry_device=%s OR exit_device=%s)")
    params.extend([int(device_id), int(device_id)])


class MySQLPunchRecordRepository(PunchRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save_batch(self, records: Sequence[ReconciledRecord]) -> int:
        rows = [r.to_row() for r in records]
        if not rows:
            return 0
        # single cursor/connection: any failure rolls back the whole batch
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.executemany(_INSERT_SQL, rows)
        logger.info("Inserted %d punch records", len(rows))
        return len(rows)

    def list_records(self, filters: RecordFilters) -> Sequence[StoredPunchRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if filters.name:
            clauses.append("person_name LIKE %s")
            params.append(contains_pattern(filters.name))

        if filters.date:
            clauses.append("work_date=%s")
            params.append(filters.date)
        else:
            if filters.start_date:
                clauses.append("work_date>=%s")
                params.append(filters.start_date)
            if filters.end_date:
                clauses.append("work_date<=%s")
                params.append(filters.end_date)

        if filters.period:
            clauses.append("period=%s")
            params.append(filters.period.value)
        if filters.duplicates is not None:
            clauses.append("is_duplicate=%s")
            params.append(bool(filters.duplicates))
        if filters.device_id is not None:
            _device_clause(filters.device_id, clauses, params)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT record_id, person_name, work_date, period, entry_time, exit_time, duration_minutes,
                       entry_device, exit_device, is_duplicate, source_labels, observation
                FROM punch_records
                {where_clause(clauses)}
                ORDER BY work_date DESC, entry_time DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                StoredPunchRecord(
                    record_id=int(r["record_id"]),
                    person=r["person_name"],
                    date=r["work_date"],
                    period=Period(r["period"]),
                    entry_time=normalize_mysql_time(r.get("entry_time")),
                    exit_time=normalize_mysql_time(r.get("exit_time")),
                    duration_minutes=r.get("duration_minutes"),
                    entry_device=r.get("entry_device"),
                    exit_device=r.get("exit_device"),
                    is_duplicate=bool(r.get("is_duplicate")),
                    source_labels=r.get("source_labels"),
                    observation=r.get("observation"),
                )
                for r in rows
            ]

    def _filter(self, work_date: Optional[date], device_id: Optional[int]) -> tuple[str, tuple]:
        clauses: list[str] = []
        params: list[object] = []
        if work_date:
            clauses.append("work_date=%s")
            params.append(work_date)
        if device_id is not None:
            _device_clause(device_id, clauses, params)
        return where_clause(clauses), tuple(params)

    def period_indicators(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> Sequence[dict]:
        where, params = self._filter(work_date, device_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    period,
                    COUNT(*) AS total,
                    SUM(CASE WHEN is_duplicate THEN 1 ELSE 0 END) AS duplicates,
                    AVG(duration_minutes) AS avg_minutes,
                    SUM(CASE WHEN entry_time IS NOT NULL AND exit_time IS NOT NULL THEN 1 ELSE 0 END) AS paired
                FROM punch_records
                {where}
                GROUP BY period
                """,
                params,
            )
            return [
                {
                    "period": r["period"],
                    "total": as_int(r["total"]),
                    "duplicates": as_int(r["duplicates"]),
                    "avg_minutes": float(r["avg_minutes"]) if r.get("avg_minutes") is not None else None,
                    "paired": as_int(r["paired"]),
                }
                for r in fetchall(cur)
            ]

    def totals(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> dict:
        where, params = self._filter(work_date, device_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    COUNT(*) AS total,
                    SUM(CASE WHEN is_duplicate THEN 1 ELSE 0 END) AS duplicates,
                    SUM(CASE WHEN entry_time IS NOT NULL AND exit_time IS NOT NULL THEN 1 ELSE 0 END) AS paired
                FROM punch_records
                {where}
                """,
                params,
            )
            r = fetchone(cur) or {}
            return {
                "total": as_int(r.get("total")),
                "duplicates": as_int(r.get("duplicates")),
                "paired": as_int(r.get("paired")),
            }

    def statistics(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(DISTINCT person_name) AS total_people,
                    COUNT(DISTINCT work_date) AS total_days,
                    COUNT(*) AS total_records,
                    SUM(CASE WHEN entry_device=1 OR exit_device=1 THEN 1 ELSE 0 END) AS device_1,
                    SUM(CASE WHEN entry_device=2 OR exit_device=2 THEN 1 ELSE 0 END) AS device_2,
                    SUM(CASE WHEN is_duplicate THEN 1 ELSE 0 END) AS total_duplicates,
                    SUM(CASE WHEN entry_time IS NOT NULL AND exit_time IS NOT NULL THEN 1 ELSE 0 END) AS total_paired,
                    MIN(work_date) AS first_date,
                    MAX(work_date) AS last_date
                FROM punch_records
                """
            )
            r = fetchone(cur) or {}
            return {
                "total_people": as_int(r.get("total_people")),
                "total_days": as_int(r.get("total_days")),
                "total_records": as_int(r.get("total_records")),
                "device_1": as_int(r.get("device_1")),
                "device_2": as_int(r.get("device_2")),
                "total_duplicates": as_int(r.get("total_duplicates")),
                "total_paired": as_int(r.get("total_paired")),
                "first_date": r.get("first_date"),
                "last_date": r.get("last_date"),
            }

    def delete_records(self, *, work_date: Optional[date] = None, device_id: Optional[int] = None) -> int:
        where, params = self._filter(work_date, device_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM punch_records {where}", params)
            return int(cur.rowcount)
