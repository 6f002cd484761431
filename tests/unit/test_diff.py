"""Tests for the snapshot differ and the primary lookup."""

from oralicense_engine.hosts.schemas import DatabaseRecord, HostSnapshot, LicenseEntry
from oralicense_engine.licensing.diff import (
    LicenseTransition,
    diff_licenses,
    diff_snapshots,
    has_enterprise_license,
)
from oralicense_engine.licensing.primary_lookup import find_primary


def _db(name: str, db_id: int = 1, **licenses: float) -> DatabaseRecord:
    return DatabaseRecord(
        name=name,
        db_id=db_id,
        licenses=[LicenseEntry(name=n.replace("_", " "), count=c) for n, c in licenses.items()],
    )


def _snapshot(*databases: DatabaseRecord) -> HostSnapshot:
    return HostSnapshot(hostname="ora01", databases=list(databases))


class TestDiffLicenses:
    def test_activated(self):
        diff = diff_licenses(
            [LicenseEntry(name="Diagnostics Pack", count=0)],
            [LicenseEntry(name="Diagnostics Pack", count=4)],
        )
        assert diff == {"Diagnostics Pack": LicenseTransition.ACTIVATED}

    def test_absent_then_present_is_activated(self):
        diff = diff_licenses([], [LicenseEntry(name="Tuning Pack", count=2)])
        assert diff["Tuning Pack"] is LicenseTransition.ACTIVATED

    def test_deactivated(self):
        diff = diff_licenses(
            [LicenseEntry(name="Tuning Pack", count=2)],
            [LicenseEntry(name="Tuning Pack", count=0)],
        )
        assert diff["Tuning Pack"] is LicenseTransition.DEACTIVATED

    def test_removed_entry_is_deactivated(self):
        diff = diff_licenses([LicenseEntry(name="Tuning Pack", count=2)], [])
        assert diff["Tuning Pack"] is LicenseTransition.DEACTIVATED

    def test_count_change_is_unchanged(self):
        diff = diff_licenses(
            [LicenseEntry(name="Oracle ENT", count=2)],
            [LicenseEntry(name="Oracle ENT", count=8)],
        )
        assert diff["Oracle ENT"] is LicenseTransition.UNCHANGED


class TestDiffSnapshots:
    def test_first_ingestion(self):
        diff = diff_snapshots(None, _snapshot(_db("D1", Oracle_ENT=4)))
        assert diff.new_databases == ["D1"]
        assert diff.transitions["D1"] == {"Oracle ENT": LicenseTransition.ACTIVATED}

    def test_new_database(self):
        diff = diff_snapshots(_snapshot(_db("D1")), _snapshot(_db("D1"), _db("D2")))
        assert diff.new_databases == ["D2"]

    def test_identical_snapshots_have_no_changes(self):
        snapshot = _snapshot(
            _db("D1", Oracle_ENT=4, Diagnostics_Pack=4),
            _db("D2", Oracle_STD=2, Partitioning=0),
        )
        diff = diff_snapshots(snapshot, snapshot)
        assert diff.new_databases == []
        assert diff.activation_events == []

    def test_activated_features_exclude_baseline_editions(self):
        diff = diff_snapshots(
            _snapshot(_db("D1", Oracle_ENT=0, Oracle_STD=0, Oracle_EXE=0, Diagnostics_Pack=0)),
            _snapshot(_db("D1", Oracle_ENT=4, Oracle_STD=4, Oracle_EXE=4, Diagnostics_Pack=4)),
        )
        assert diff.activated_features("D1") == ["Diagnostics Pack"]

    def test_activation_events(self):
        diff = diff_snapshots(
            _snapshot(_db("D1", Tuning_Pack=2)),
            _snapshot(_db("D1", Diagnostics_Pack=4)),
        )
        events = {(e.database, e.license, e.transition) for e in diff.activation_events}
        assert events == {
            ("D1", "Diagnostics Pack", LicenseTransition.ACTIVATED),
            ("D1", "Tuning Pack", LicenseTransition.DEACTIVATED),
        }

    def test_order_does_not_change_transitions(self):
        previous = _snapshot(_db("D1", Tuning_Pack=2), _db("D2"))
        current = _snapshot(_db("D2", Partitioning=1), _db("D1", Diagnostics_Pack=4))
        reordered = _snapshot(_db("D1", Diagnostics_Pack=4), _db("D2", Partitioning=1))
        assert (
            set(diff_snapshots(previous, current).activation_events)
            == set(diff_snapshots(previous, reordered).activation_events)
        )


class TestHasEnterpriseLicense:
    def test_active_enterprise(self):
        assert has_enterprise_license(_db("D1", Oracle_ENT=4))

    def test_zero_enterprise(self):
        assert not has_enterprise_license(_db("D1", Oracle_ENT=0))

    def test_missing_database(self):
        assert not has_enterprise_license(None)


class TestFindPrimary:
    def test_matches_on_db_id_and_name(self):
        standby = DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PHYSICAL STANDBY")
        primary = DatabaseRecord(name="D2", db_id=42, status="OPEN", role="PRIMARY")
        assert find_primary(standby, [_db("D2", db_id=7), primary]) is primary

    def test_name_alone_does_not_match(self):
        standby = DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PHYSICAL STANDBY")
        assert find_primary(standby, [_db("D2", db_id=7)]) is None

    def test_ignores_non_primary_or_non_open(self):
        standby = DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PHYSICAL STANDBY")
        fleet = [
            DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PHYSICAL STANDBY"),
            DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PRIMARY"),
        ]
        assert find_primary(standby, fleet) is None

    def test_empty_fleet(self):
        standby = DatabaseRecord(name="D2", db_id=42, status="MOUNTED", role="PHYSICAL STANDBY")
        assert find_primary(standby, []) is None
