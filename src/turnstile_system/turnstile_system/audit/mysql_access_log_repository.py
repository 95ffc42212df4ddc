from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AccessLogEntry
from .repository import AccessLogRepository


class MySQLAccessLogRepository(AccessLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, entry: AccessLogEntry) -> None:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute(
                """
                INSERT INTO auth_access_logs
                (user_id, username, path, method, status_code, started_at, finished_at, duration_ms, ip, user_agent)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    entry.user_id,
                    entry.username,
                    entry.path,
                    entry.method,
                    entry.status_code,
                    entry.started_at,
                    entry.finished_at,
                    entry.duration_ms,
                    entry.ip,
                    entry.user_agent,
                ),
            )

    def list_recent(self, limit: int) -> Sequence[AccessLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, user_id, username, path, method, status_code,
                       started_at, finished_at, duration_ms, ip, user_agent
                FROM auth_access_logs
                ORDER BY started_at DESC, log_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AccessLogEntry(
                    log_id=int(r["log_id"]),
                    user_id=r.get("user_id"),
                    username=r.get("username"),
                    path=r["path"],
                    method=r["method"],
                    status_code=int(r["status_code"]),
                    started_at=r["started_at"],
                    finished_at=r["finished_at"],
                    duration_ms=int(r["duration_ms"]),
                    ip=r.get("ip"),
                    user_agent=r.get("user_agent"),
                )
                for r in fetchall(cur)
            ]
