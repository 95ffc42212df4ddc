"""Builders and in-memory fakes shared by the test modules."""

from __future__ import annotations

import io
from datetime import time
from typing import Optional

import pandas as pd

from src.turnstile_system.turnstile_system.audit.model import AccessLogEntry
from src.turnstile_system.turnstile_system.core.enums import Direction, Period, Role
from src.turnstile_system.turnstile_system.punches.model import (
    PunchEvent,
    PunchRow,
    ReconciledRecord,
    RecordFilters,
    StoredPunchRecord,
)
from src.turnstile_system.turnstile_system.users.model import User


def hms(value: str) -> time:
    h, m, s = (int(p) for p in value.split(":"))
    return time(h, m, s)


def punch(person, day, at, direction, device=None, label=None) -> PunchEvent:
    return PunchEvent(
        person=person,
        date=day,
        time_of_day=hms(at),
        direction=direction,
        device_id=device,
        source_label=label,
    )


def entry(person, day, at, device=None, label=None) -> PunchEvent:
    return punch(person, day, at, Direction.ENTRY, device, label)


def exit_(person, day, at, device=None, label=None) -> PunchEvent:
    return punch(person, day, at, Direction.EXIT, device, label)


def rows(person, day, *times) -> list[PunchRow]:
    return [PunchRow(person=person, date=day, time=t) for t in times]


def workbook_bytes(sheets: dict[str, Optional[list[dict]]]) -> bytes:
    """Build an export workbook: three banner rows, header on row 4.

    A sheet mapped to None holds only the banner line.
    """

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for name, records in sheets.items():
            if records is None:
                writer.book.create_sheet(name)
            else:
                frame = pd.DataFrame(records, columns=["NOME", "DATA", "HORA"])
                frame.to_excel(writer, sheet_name=name, index=False, startrow=3)
            writer.sheets[name].cell(row=1, column=1, value="Relatório de acesso")
    return out.getvalue()


class InMemoryPunchRecords:
    def __init__(self, *, fail_on_save: bool = False):
        self.saved: list[ReconciledRecord] = []
        self.batches = 0
        self.last_delete: Optional[dict] = None
        self._fail_on_save = fail_on_save

    def save_batch(self, records) -> int:
        if self._fail_on_save:
            raise RuntimeError("db down")
        self.saved.extend(records)
        self.batches += 1
        return len(records)

    def _stored(self) -> list[StoredPunchRecord]:
        return [
            StoredPunchRecord(
                record_id=i,
                person=r.person,
                date=r.date,
                period=r.period,
                entry_time=r.entry_time,
                exit_time=r.exit_time,
                duration_minutes=r.duration_minutes,
                entry_device=r.entry_device,
                exit_device=r.exit_device,
                is_duplicate=r.is_duplicate,
                source_labels="; ".join(r.source_labels) or None,
                observation=r.observation,
            )
            for i, r in enumerate(self.saved, start=1)
        ]

    def list_records(self, filters: RecordFilters):
        items = self._stored()
        if filters.name:
            items = [r for r in items if filters.name.lower() in r.person.lower()]
        if filters.date:
            items = [r for r in items if r.date == filters.date]
        if filters.period:
            items = [r for r in items if r.period == filters.period]
        if filters.duplicates is not None:
            items = [r for r in items if r.is_duplicate == filters.duplicates]
        return items

    def period_indicators(self, *, work_date=None, device_id=None):
        out = []
        for period in Period:
            items = [r for r in self.saved if r.period == period and (work_date is None or r.date == work_date)]
            if not items:
                continue
            durations = [r.duration_minutes for r in items if r.duration_minutes is not None]
            out.append(
                {
                    "period": period.value,
                    "total": len(items),
                    "duplicates": sum(r.is_duplicate for r in items),
                    "avg_minutes": (sum(durations) / len(durations)) if durations else None,
                    "paired": sum(r.is_paired for r in items),
                }
            )
        return out

    def totals(self, *, work_date=None, device_id=None):
        items = [r for r in self.saved if work_date is None or r.date == work_date]
        return {
            "total": len(items),
            "duplicates": sum(r.is_duplicate for r in items),
            "paired": sum(r.is_paired for r in items),
        }

    def statistics(self):
        dates = [r.date for r in self.saved]
        return {
            "total_people": len({r.person for r in self.saved}),
            "total_days": len(set(dates)),
            "total_records": len(self.saved),
            "device_1": sum(1 for r in self.saved if 1 in (r.entry_device, r.exit_device)),
            "device_2": sum(1 for r in self.saved if 2 in (r.entry_device, r.exit_device)),
            "total_duplicates": sum(r.is_duplicate for r in self.saved),
            "total_paired": sum(r.is_paired for r in self.saved),
            "first_date": min(dates) if dates else None,
            "last_date": max(dates) if dates else None,
        }

    def delete_records(self, *, work_date=None, device_id=None) -> int:
        self.last_delete = {"work_date": work_date, "device_id": device_id}
        before = len(self.saved)
        self.saved = [
            r
            for r in self.saved
            if not (
                (work_date is None or r.date == work_date)
                and (device_id is None or device_id in (r.entry_device, r.exit_device))
            )
        ]
        return before - len(self.saved)


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self._by_id = {u.user_id: u for u in users}
        self.logins: list[int] = []

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = User(user_id=user_id, username=username, password_hash=password_hash, role=role)
        return user_id

    def update_user(self, user_id: int, *, role=None, is_active=None) -> bool:
        u = self._by_id.get(int(user_id))
        if not u:
            return False
        self._by_id[u.user_id] = User(
            user_id=u.user_id,
            username=u.username,
            password_hash=u.password_hash,
            role=role or u.role,
            is_active=u.is_active if is_active is None else is_active,
        )
        return True

    def touch_last_login(self, user_id: int) -> None:
        self.logins.append(user_id)

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(int(user_id), None) is not None

    def list_users(self):
        return sorted(self._by_id.values(), key=lambda u: u.user_id, reverse=True)


class InMemoryAccessLogs:
    def __init__(self, *, fail_on_record: bool = False):
        self.entries: list[AccessLogEntry] = []
        self._fail_on_record = fail_on_record

    def record(self, entry: AccessLogEntry) -> None:
        if self._fail_on_record:
            raise RuntimeError("db down")
        self.entries.append(entry)

    def list_recent(self, limit: int):
        return list(reversed(self.entries))[:limit]


class RecordingCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=None):
        self._conn.statements.append((" ".join(sql.split()), params))
        self.rowcount = self._conn.rowcount

    def executemany(self, sql, seq):
        seq = list(seq)
        self._conn.statements.append((" ".join(sql.split()), seq))
        self.rowcount = len(seq)

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        pass


class RecordingConnection:
    """Stands in for ``DatabaseConnection``; records SQL instead of running it."""

    def __init__(self, rows=None, rowcount: int = 0):
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.statements: list[tuple] = []
        self.commits = 0
        self.rollbacks = 0

    def connect(self):
        return self

    def cursor(self, dictionary: bool = True):
        return RecordingCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class FakeConnection:
    def __init__(self, healthy: bool = True):
        self.healthy = healthy

    def ping(self) -> bool:
        if not self.healthy:
            raise ConnectionError("unreachable")
        return True
