from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, username: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def update_user(self, user_id: int, *, role: Optional[Role] = None, is_active: Optional[bool] = None) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int) -> None:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError
