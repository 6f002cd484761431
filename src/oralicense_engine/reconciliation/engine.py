"""Reconciliation of a freshly ingested host snapshot against its predecessor."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from oralicense_engine.alerts import factory
from oralicense_engine.alerts.schemas import Alert
from oralicense_engine.common.config import OraLicenseSettings
from oralicense_engine.common.exceptions import RemoteSourceError
from oralicense_engine.common.models import utcnow
from oralicense_engine.hosts.schemas import HostSnapshot
from oralicense_engine.licensing.diff import (
    SnapshotDiff,
    databases_by_name,
    diff_snapshots,
    has_enterprise_license,
)
from oralicense_engine.licensing.entitlements import (
    apply_inherited_licenses,
    compute_inherited_licenses,
    resolve_core_factor,
)
from oralicense_engine.licensing.license_types import (
    assign_license_type_ids,
    rank_license_types,
)
from oralicense_engine.licensing.primary_lookup import find_primary
from oralicense_engine.reconciliation.ports import (
    AlertEmitter,
    FleetDatabaseSource,
    LicenseTypeSource,
)

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome of one reconciliation run."""
    hostname: str
    alerts: list[Alert] = field(default_factory=list)
    failed_alerts: list[Alert] = field(default_factory=list)
    degraded_checks: list[str] = field(default_factory=list)
    diff: Optional[SnapshotDiff] = None

    @property
    def alert_codes(self) -> list[str]:
        return [a.alert_code.value for a in self.alerts]


@dataclass
class _Run:
    previous: Optional[HostSnapshot]
    current: HostSnapshot
    report: ReconciliationReport
    now: datetime

    @property
    def hostname(self) -> str:
        return self.current.hostname


class Reconciler:
    """
    Runs the license checks for one host ingestion.

    Checks run in a fixed order and are isolated from each other: a failing
    check is logged and recorded in the report, the following checks still
    run. ``reconcile`` never raises for collaborator failures. Only the
    current snapshot's database license entries are mutated.
    """

    def __init__(
        self,
        fleet_source: FleetDatabaseSource,
        license_type_source: LicenseTypeSource,
        alert_emitter: AlertEmitter,
        core_factors: Mapping[str, float] | None = None,
        default_core_factor: float = 1.0,
        license_type_metrics_by_environment: Mapping[str, Sequence[str]] | None = None,
        license_type_metrics_default: Sequence[str] = (),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.fleet_source = fleet_source
        self.license_type_source = license_type_source
        self.alert_emitter = alert_emitter
        self.core_factors = dict(core_factors or {})
        self.default_core_factor = default_core_factor
        self.license_type_metrics_by_environment = dict(license_type_metrics_by_environment or {})
        self.license_type_metrics_default = list(license_type_metrics_default)
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: OraLicenseSettings,
        fleet_source: FleetDatabaseSource,
        license_type_source: LicenseTypeSource,
        alert_emitter: AlertEmitter,
    ) -> "Reconciler":
        return cls(
            fleet_source,
            license_type_source,
            alert_emitter,
            core_factors=settings.core_factors,
            default_core_factor=settings.default_core_factor,
            license_type_metrics_by_environment=settings.license_type_metrics_by_environment,
            license_type_metrics_default=settings.license_type_metrics_default,
        )

    def reconcile(
        self,
        previous: Optional[HostSnapshot],
        current: HostSnapshot,
    ) -> ReconciliationReport:
        run = _Run(
            previous=previous,
            current=current,
            report=ReconciliationReport(hostname=current.hostname),
            now=self._clock(),
        )

        checks: list[tuple[str, Callable[[_Run], None]]] = [
            ("secondary_databases", self._check_secondary_databases),
            ("license_types", self._set_license_types),
            ("diff", self._diff),
            ("new_databases", self._check_new_databases),
            ("enterprise_license", self._check_new_enterprise_license),
            ("activated_features", self._check_activated_features),
            ("unlisted_running_databases", self._check_unlisted_running_databases),
        ]
        for name, check in checks:
            try:
                check(run)
            except Exception:
                logger.exception(
                    "Check %s failed for host %s", name, run.hostname,
                    extra={"hostname": run.hostname, "check": name},
                )
                run.report.degraded_checks.append(name)

        logger.info(
            "Reconciled host %s: %d alert(s), %d failed submission(s)",
            run.hostname, len(run.report.alerts), len(run.report.failed_alerts),
            extra={"hostname": run.hostname},
        )
        return run.report

    def _emit(self, run: _Run, alert: Alert) -> None:
        try:
            self.alert_emitter.throw_new_alert(alert)
        except Exception as e:
            logger.error(
                "Can't throw new alert %s for host %s: %s",
                alert.alert_code.value, run.hostname, e,
                extra={"hostname": run.hostname, "alert_code": alert.alert_code.value},
            )
            run.report.failed_alerts.append(alert)
            return
        run.report.alerts.append(alert)

    # ── Checks ──

    def _check_secondary_databases(self, run: _Run) -> None:
        secondaries = run.current.secondary_databases()
        if not secondaries:
            return

        try:
            fleet = self.fleet_source.get_primary_open_databases()
        except RemoteSourceError as e:
            logger.error(
                "Skipping standby licenses of host %s: %s", run.hostname, e,
                extra={"hostname": run.hostname, "check": "secondary_databases"},
            )
            run.report.degraded_checks.append("secondary_databases")
            return

        info = run.current.info
        core_factor = resolve_core_factor(
            info.hardware_abstraction_technology,
            self.core_factors,
            self.default_core_factor,
        )

        for db in secondaries:
            primary = find_primary(db, fleet)
            if primary is None:
                logger.warning(
                    "No open primary found for standby %s on host %s", db.name, run.hostname,
                    extra={"hostname": run.hostname, "dbname": db.name},
                )
                self._emit(run, factory.missing_primary_database(run.hostname, db.name, run.now))
                continue

            computed = compute_inherited_licenses(primary.licenses, info.cpu_cores, core_factor)
            type_ids = {lic.name: lic.license_type_id for lic in primary.licenses}
            apply_inherited_licenses(db, computed, type_ids)

    def _set_license_types(self, run: _Run) -> None:
        environment = run.current.environment
        try:
            catalog = self.license_type_source.get_license_types(environment)
        except RemoteSourceError as e:
            logger.error(
                "License types unavailable for host %s, leaving licenses unresolved: %s",
                run.hostname, e,
                extra={"hostname": run.hostname, "check": "license_types"},
            )
            run.report.degraded_checks.append("license_types")
            catalog = []

        catalog = rank_license_types(
            catalog,
            environment,
            self.license_type_metrics_by_environment,
            self.license_type_metrics_default,
        )
        for db in run.current.databases:
            assign_license_type_ids(catalog, db)

    def _diff(self, run: _Run) -> None:
        run.report.diff = diff_snapshots(run.previous, run.current)

    def _check_new_databases(self, run: _Run) -> None:
        if run.report.diff is None:
            return
        for dbname in run.report.diff.new_databases:
            self._emit(run, factory.new_database(run.hostname, dbname, run.now))

    def _check_new_enterprise_license(self, run: _Run) -> None:
        if not run.current.databases:
            return

        previous = run.previous
        cores_increased = (
            previous is not None
            and run.current.info.cpu_cores > previous.info.cpu_cores
        )
        old_dbs = databases_by_name(previous)

        if cores_increased or any(
            not has_enterprise_license(old_dbs.get(db.name)) and has_enterprise_license(db)
            for db in run.current.databases
        ):
            self._emit(run, factory.new_enterprise_license(run.hostname, run.now))

    def _check_activated_features(self, run: _Run) -> None:
        if run.report.diff is None:
            return
        for dbname in run.report.diff.transitions:
            features = run.report.diff.activated_features(dbname)
            if features:
                self._emit(run, factory.activated_features(run.hostname, dbname, features, run.now))

    def _check_unlisted_running_databases(self, run: _Run) -> None:
        for dbname in dict.fromkeys(run.current.unlisted_running_databases):
            self._emit(run, factory.unlisted_running_database(run.hostname, dbname, run.now))
