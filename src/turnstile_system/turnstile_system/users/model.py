from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: API user.

    Note: plain data object, no database access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
