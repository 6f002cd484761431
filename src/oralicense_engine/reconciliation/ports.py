"""Capabilities the reconciler consumes from its collaborators."""

from typing import Protocol

from oralicense_engine.alerts.schemas import Alert
from oralicense_engine.hosts.schemas import DatabaseRecord
from oralicense_engine.licensing.schemas import LicenseTypeCatalogEntry


class FleetDatabaseSource(Protocol):
    def get_primary_open_databases(self) -> list[DatabaseRecord]:
        """Open primary databases of every current host. Raises RemoteSourceError."""
        ...


class LicenseTypeSource(Protocol):
    def get_license_types(self, environment: str) -> list[LicenseTypeCatalogEntry]:
        """License type catalog for an environment. Raises RemoteSourceError."""
        ...


class AlertEmitter(Protocol):
    def throw_new_alert(self, alert: Alert) -> None:
        """Submit an alert. Raises AlertSubmissionError."""
        ...
