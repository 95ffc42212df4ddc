from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_access_log_repository import MySQLAccessLogRepository
from .audit.repository import AccessLogRepository
from .audit.service import AccessLogService
from .database.connection import DBConfig, DatabaseConnection
from .punches.factory import ReconciliationStrategyFactory
from .punches.mysql_punch_repository import MySQLPunchRecordRepository
from .punches.periods import CONSOLIDATED_POLICY, SINGLE_DEVICE_POLICY, policy_for_name
from .punches.repository import PunchRecordRepository
from .punches.service import PunchImportService, PunchQueryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: UserRepository
    punch_records_repo: PunchRecordRepository
    access_logs_repo: AccessLogRepository

    auth_service: AuthService
    user_service: UserService
    punch_import_service: PunchImportService
    punch_query_service: PunchQueryService
    access_log_service: AccessLogService


def build_services(
    conn: DatabaseConnection,
    users_repo: UserRepository,
    punch_records_repo: PunchRecordRepository,
    access_logs_repo: AccessLogRepository,
    *,
    single_policy: str = SINGLE_DEVICE_POLICY.name,
    consolidated_policy: str = CONSOLIDATED_POLICY.name,
) -> Container:
    factory = ReconciliationStrategyFactory(
        single_policy=policy_for_name(single_policy),
        consolidated_policy=policy_for_name(consolidated_policy),
    )
    return Container(
        conn=conn,
        users_repo=users_repo,
        punch_records_repo=punch_records_repo,
        access_logs_repo=access_logs_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        punch_import_service=PunchImportService(punch_records_repo, strategy_factory=factory),
        punch_query_service=PunchQueryService(punch_records_repo),
        access_log_service=AccessLogService(access_logs_repo),
    )


def build_container(
    *,
    db_config: dict,
    single_policy: str = SINGLE_DEVICE_POLICY.name,
    consolidated_policy: str = CONSOLIDATED_POLICY.name,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        conn,
        MySQLUserRepository(conn),
        MySQLPunchRecordRepository(conn),
        MySQLAccessLogRepository(conn),
        single_policy=single_policy,
        consolidated_policy=consolidated_policy,
    )
