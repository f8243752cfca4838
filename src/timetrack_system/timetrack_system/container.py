from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core import constants
from .database.connection import DatabaseConnection, db_config_from_dict
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .organizations.service import OrganizationService
from .sequences.mysql_sequence_repository import MySQLSequenceRepository
from .sequences.repository import SequenceRepository
from .sequences.service import SequenceService
from .time_entries.locks import EntryLock, MySQLEntryLock
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .working_hours.mysql_working_hours_repository import MySQLWorkingHoursRepository
from .working_hours.repository import WorkingHoursRepository
from .working_hours.service import WorkingHoursService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    organizations_repo: OrganizationRepository
    working_hours_repo: WorkingHoursRepository
    sequences_repo: SequenceRepository
    time_entries_repo: TimeEntryRepository
    entry_lock: EntryLock

    working_hours_service: WorkingHoursService
    sequence_service: SequenceService
    organization_service: OrganizationService
    time_entry_service: TimeEntryService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    organizations_repo: OrganizationRepository,
    working_hours_repo: WorkingHoursRepository,
    sequences_repo: SequenceRepository,
    time_entries_repo: TimeEntryRepository,
    entry_lock: EntryLock,
    timezone: str = constants.DEFAULT_TIMEZONE,
    sequence_max_retries: int = constants.DEFAULT_SEQUENCE_MAX_RETRIES,
    overlap_span_all_days: bool = False,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""
    working_hours_service = WorkingHoursService(working_hours_repo)
    sequence_service = SequenceService(sequences_repo, max_retries=sequence_max_retries)
    organization_service = OrganizationService(organizations_repo, sequence_service, working_hours_service)
    time_entry_service = TimeEntryService(
        time_entries_repo,
        working_hours_service,
        entry_lock,
        timezone=timezone,
        overlap_span_all_days=overlap_span_all_days,
    )

    return Container(
        conn=conn,
        organizations_repo=organizations_repo,
        working_hours_repo=working_hours_repo,
        sequences_repo=sequences_repo,
        time_entries_repo=time_entries_repo,
        entry_lock=entry_lock,
        working_hours_service=working_hours_service,
        sequence_service=sequence_service,
        organization_service=organization_service,
        time_entry_service=time_entry_service,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = constants.DEFAULT_TIMEZONE,
    sequence_max_retries: int = constants.DEFAULT_SEQUENCE_MAX_RETRIES,
    overlap_span_all_days: bool = False,
    lock_timeout_seconds: float = constants.DEFAULT_LOCK_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(db_config_from_dict(db_config))

    return assemble(
        conn=conn,
        organizations_repo=MySQLOrganizationRepository(conn),
        working_hours_repo=MySQLWorkingHoursRepository(conn),
        sequences_repo=MySQLSequenceRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        entry_lock=MySQLEntryLock(conn, timeout_seconds=lock_timeout_seconds),
        timezone=timezone,
        sequence_max_retries=sequence_max_retries,
        overlap_span_all_days=overlap_span_all_days,
    )
