from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_SELECT_USER = """
    SELECT user_id, username, password_hash, role, is_active, last_login, created_at
    FROM auth_users
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_USER + " WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_USER + " WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO auth_users (username, password_hash, role) VALUES (%s, %s, %s)",
                (username, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def update_user(self, user_id: int, *, role: Optional[Role] = None, is_active: Optional[bool] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE auth_users
                SET role=COALESCE(%s, role), is_active=COALESCE(%s, is_active)
                WHERE user_id=%s
                """,
                (role.value if role else None, is_active, int(user_id)),
            )
            return cur.rowcount > 0

    def touch_last_login(self, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE auth_users SET last_login=NOW() WHERE user_id=%s", (int(user_id),))

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_users(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_USER + " ORDER BY created_at DESC, user_id DESC")
            return [_to_user(r) for r in fetchall(cur)]
