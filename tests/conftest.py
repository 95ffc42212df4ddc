from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from src.turnstile_system.turnstile_system.core.enums import Role
from src.turnstile_system.turnstile_system.users.model import User
from support import InMemoryAccessLogs, InMemoryPunchRecords, InMemoryUsers


@pytest.fixture
def work_day() -> date:
    return date(2024, 3, 5)


@pytest.fixture
def punch_records() -> InMemoryPunchRecords:
    return InMemoryPunchRecords()


@pytest.fixture
def access_logs() -> InMemoryAccessLogs:
    return InMemoryAccessLogs()


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id=1, username="admin", password_hash=generate_password_hash("admin123"), role=Role.ADMIN),
            User(user_id=2, username="ana", password_hash=generate_password_hash("secret1"), role=Role.USER),
            User(
                user_id=3,
                username="inativo",
                password_hash=generate_password_hash("secret1"),
                role=Role.USER,
                is_active=False,
            ),
        ]
    )
