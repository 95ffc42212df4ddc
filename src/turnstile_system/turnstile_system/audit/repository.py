from __future__ import annotations

from typing import Protocol, Sequence

from .model import AccessLogEntry


class AccessLogRepository(Protocol):
    def record(self, entry: AccessLogEntry) -> None:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AccessLogEntry]:
        raise NotImplementedError
