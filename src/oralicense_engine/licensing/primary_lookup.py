"""Locate the primary counterpart of a standby database in the fleet."""

from typing import Iterable, Optional

from oralicense_engine.hosts.schemas import (
    DATABASE_ROLE_PRIMARY,
    DATABASE_STATUS_OPEN,
    DatabaseRecord,
)


def is_primary_open(database: DatabaseRecord) -> bool:
    return database.role == DATABASE_ROLE_PRIMARY and database.status == DATABASE_STATUS_OPEN


def find_primary(
    secondary: DatabaseRecord,
    fleet: Iterable[DatabaseRecord],
) -> Optional[DatabaseRecord]:
    """Return the open primary sharing the standby's (db_id, name), or None."""
    for db in fleet:
        if is_primary_open(db) and db.identity == secondary.identity:
            return db
    return None
