from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import ACCESS_LOG_PREFIXES, DEFAULT_ACCESS_LOG_LIMIT, MAX_ACCESS_LOG_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import AccessLogEntry
from .repository import AccessLogRepository


class AccessLogService:
    """Use case: audit trail of API requests."""

    def __init__(self, logs: AccessLogRepository, *, prefixes: Sequence[str] = ACCESS_LOG_PREFIXES):
        self._logs = logs
        self._prefixes = tuple(prefixes)

    def should_log(self, path: str) -> bool:
        return path.startswith(self._prefixes)

    def record(self, entry: AccessLogEntry) -> None:
        self._logs.record(entry)

    def list_recent(self, *, current_role: Optional[Role], limit=None) -> Sequence[AccessLogEntry]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Acesso negado")

        if limit is None or str(limit).strip() == "":
            return self._logs.list_recent(DEFAULT_ACCESS_LOG_LIMIT)
        try:
            n = int(str(limit).strip())
        except ValueError:
            raise ValidationError("limit inválido") from None
        if n < 1:
            raise ValidationError("limit inválido")
        return self._logs.list_recent(min(n, MAX_ACCESS_LOG_LIMIT))
