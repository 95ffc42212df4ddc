from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not username or not password:
            raise AuthenticationError("Usuário e senha são obrigatórios")

        user = self._users.get_by_username(username.strip())
        if not user or not user.is_active:
            raise AuthenticationError("Credenciais inválidas")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Credenciais inválidas")

        self._users.touch_last_login(user.user_id)
        return SessionUser(user_id=user.user_id, username=user.username, role=user.role)


class UserService:
    """Use case: manage API users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(self, *, current_role: Role, username: str, password: str, role: Role = Role.USER) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Acesso negado")

        username = require_non_empty(username, "Usuário")
        require_min_length(password, "Senha", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Usuário já existe")

        return self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: int,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Acesso negado")
        if role is None and is_active is None:
            raise ValidationError("Nada para atualizar")

        if not self._users.get_by_id(user_id):
            raise NotFoundError("Usuário não encontrado")
        self._users.update_user(user_id, role=role, is_active=is_active)

    def list_users(self, *, current_role: Role) -> Sequence[User]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Acesso negado")
        return self._users.list_users()

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Acesso negado")
        if int(user_id) == int(current_user_id):
            raise ValidationError("Você não pode deletar sua própria conta")

        user = self._users.get_by_id(user_id)
        if not user or not self._users.delete_by_id(user_id):
            raise NotFoundError("Usuário não encontrado")
        return user
