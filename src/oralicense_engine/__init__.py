"""OraLicense-Engine: Oracle database license reconciliation and change alerting."""

from oralicense_engine.alerts.schemas import Alert, AlertCode, AlertSeverity
from oralicense_engine.hosts.schemas import DatabaseRecord, HostSnapshot, LicenseEntry
from oralicense_engine.reconciliation.engine import ReconciliationReport, Reconciler

__all__ = [
    "Alert",
    "AlertCode",
    "AlertSeverity",
    "DatabaseRecord",
    "HostSnapshot",
    "LicenseEntry",
    "ReconciliationReport",
    "Reconciler",
]
__version__ = "0.1.0"
