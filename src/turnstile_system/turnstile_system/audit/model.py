from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AccessLogEntry:
    """One API request as written to ``auth_access_logs``."""

    path: str
    method: str
    started_at: datetime
    finished_at: datetime
    duration_ms: int
    status_code: int
    user_id: Optional[int] = None
    username: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    log_id: Optional[int] = None
