from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.service import AttendanceService
from .balances.service import BalanceService
from .common.cache import ReadThroughCache
from .common.datetime_utils import now_utc
from .core.policy import EnginePolicy
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_roster_repository import MySQLRosterRepository
from .employees.repository import RosterProvider
from .metrics.service import MetricsPublisher
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchEventStore
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import ApprovalProvider
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleSource
from .schedules.service import ScheduleCatalog


@dataclass(frozen=True)
class Container:
    policy: EnginePolicy

    punches_repo: PunchEventStore
    schedules_repo: ScheduleSource
    roster_repo: RosterProvider
    approvals_repo: ApprovalProvider

    cache: ReadThroughCache
    schedule_catalog: ScheduleCatalog
    attendance_service: AttendanceService
    balance_service: BalanceService
    metrics_publisher: MetricsPublisher


def build_engine(
    *,
    punches: PunchEventStore,
    schedules: ScheduleSource,
    roster: RosterProvider,
    approvals: ApprovalProvider,
    policy: EnginePolicy,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    """Wire the engine over any set of collaborators (MySQL or in-memory)."""

    cache = ReadThroughCache(policy.cache_ttl_seconds)
    catalog = ScheduleCatalog(schedules)
    attendance_service = AttendanceService(
        punches,
        catalog,
        roster,
        approvals,
        policy=policy,
        cache=cache,
        clock=clock,
    )
    balance_service = BalanceService(attendance_service)
    metrics_publisher = MetricsPublisher(
        attendance_service,
        balance_service,
        roster,
        approvals,
        max_workers=policy.max_workers,
        clock=clock,
    )

    return Container(
        policy=policy,
        punches_repo=punches,
        schedules_repo=schedules,
        roster_repo=roster,
        approvals_repo=approvals,
        cache=cache,
        schedule_catalog=catalog,
        attendance_service=attendance_service,
        balance_service=balance_service,
        metrics_publisher=metrics_publisher,
    )


def build_container(*, db_config: dict, policy: EnginePolicy) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_engine(
        punches=MySQLPunchRepository(conn),
        schedules=MySQLScheduleRepository(conn),
        roster=MySQLRosterRepository(conn),
        approvals=MySQLRequestRepository(conn),
        policy=policy,
    )
