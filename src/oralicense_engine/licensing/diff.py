"""License activation diff between two snapshots of the same host."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from oralicense_engine.hosts.schemas import DatabaseRecord, HostSnapshot, LicenseEntry

ENTERPRISE_EDITION = "Oracle ENT"
STANDARD_EDITION = "Oracle STD"
EXPRESS_EDITION = "Oracle EXE"

# Database editions, not optional features: never reported as activated.
BASELINE_EDITIONS: frozenset[str] = frozenset({
    ENTERPRISE_EDITION,
    STANDARD_EDITION,
    EXPRESS_EDITION,
})


class LicenseTransition(str, Enum):
    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ActivationEvent:
    database: str
    license: str
    transition: LicenseTransition


@dataclass
class SnapshotDiff:
    """Databases added and per-database license transitions."""
    new_databases: list[str] = field(default_factory=list)
    transitions: dict[str, dict[str, LicenseTransition]] = field(default_factory=dict)

    @property
    def activation_events(self) -> list[ActivationEvent]:
        return [
            ActivationEvent(db_name, lic_name, transition)
            for db_name, diff in self.transitions.items()
            for lic_name, transition in diff.items()
            if transition is not LicenseTransition.UNCHANGED
        ]

    def activated_features(self, database: str) -> list[str]:
        """Activated licenses of a database, baseline editions excluded."""
        diff = self.transitions.get(database, {})
        return sorted(
            name
            for name, transition in diff.items()
            if transition is LicenseTransition.ACTIVATED and name not in BASELINE_EDITIONS
        )


def _active_counts(licenses: list[LicenseEntry]) -> dict[str, float]:
    counts: dict[str, float] = {}
    for lic in licenses:
        counts[lic.name] = max(counts.get(lic.name, 0.0), lic.count)
    return counts


def diff_licenses(
    previous: list[LicenseEntry],
    current: list[LicenseEntry],
) -> dict[str, LicenseTransition]:
    """Classify every license name seen on either side."""
    old = _active_counts(previous)
    new = _active_counts(current)

    result: dict[str, LicenseTransition] = {}
    for name in old.keys() | new.keys():
        was_active = old.get(name, 0.0) > 0
        is_active = new.get(name, 0.0) > 0
        if is_active and not was_active:
            result[name] = LicenseTransition.ACTIVATED
        elif was_active and not is_active:
            result[name] = LicenseTransition.DEACTIVATED
        else:
            result[name] = LicenseTransition.UNCHANGED
    return result


def databases_by_name(snapshot: Optional[HostSnapshot]) -> dict[str, DatabaseRecord]:
    if snapshot is None:
        return {}
    return {db.name: db for db in snapshot.databases}


def diff_snapshots(
    previous: Optional[HostSnapshot],
    current: HostSnapshot,
) -> SnapshotDiff:
    """
    Compare two snapshots of one host.

    Databases of ``current`` missing from ``previous`` are new and diffed
    against an empty license set, so anything they carry counts as
    activated. Databases dropped since ``previous`` are ignored.
    """
    old_dbs = databases_by_name(previous)
    result = SnapshotDiff()

    for name, db in databases_by_name(current).items():
        old_db = old_dbs.get(name)
        if old_db is None:
            result.new_databases.append(name)
            old_licenses: list[LicenseEntry] = []
        else:
            old_licenses = old_db.licenses
        result.transitions[name] = diff_licenses(old_licenses, db.licenses)

    return result


def has_enterprise_license(database: Optional[DatabaseRecord]) -> bool:
    if database is None:
        return False
    return any(
        lic.name == ENTERPRISE_EDITION and lic.count > 0
        for lic in database.licenses
    )
