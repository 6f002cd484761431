"""Builders for the alerts raised while reconciling a host snapshot."""

from datetime import datetime
from typing import Optional

from oralicense_engine.alerts.schemas import (
    TECHNOLOGY_ORACLE_DATABASE,
    Alert,
    AlertCode,
    AlertSeverity,
)
from oralicense_engine.common.models import utcnow


def missing_primary_database(
    hostname: str, dbname: str, date: Optional[datetime] = None,
) -> Alert:
    return Alert(
        alert_code=AlertCode.MISSING_PRIMARY_DATABASE,
        alert_severity=AlertSeverity.WARNING,
        description=f"Missing primary database on standby database: {dbname}",
        date=date or utcnow(),
        other_info={"hostname": hostname, "dbname": dbname},
    )


def new_database(hostname: str, dbname: str, date: Optional[datetime] = None) -> Alert:
    return Alert(
        alert_affected_technology=TECHNOLOGY_ORACLE_DATABASE,
        alert_code=AlertCode.NEW_DATABASE_DISCOVERED,
        alert_severity=AlertSeverity.INFO,
        description=f"The database '{dbname}' was created on the server {hostname}",
        date=date or utcnow(),
        other_info={"hostname": hostname, "dbname": dbname},
    )


def new_enterprise_license(hostname: str, date: Optional[datetime] = None) -> Alert:
    return Alert(
        alert_affected_technology=TECHNOLOGY_ORACLE_DATABASE,
        alert_code=AlertCode.NEW_ENTERPRISE_LICENSE_REQUIRED,
        alert_severity=AlertSeverity.CRITICAL,
        description=f"The server '{hostname}' has enabled new enterprise license",
        date=date or utcnow(),
        other_info={"hostname": hostname},
    )


def activated_features(
    hostname: str, dbname: str, features: list[str], date: Optional[datetime] = None,
) -> Alert:
    return Alert(
        alert_affected_technology=TECHNOLOGY_ORACLE_DATABASE,
        alert_code=AlertCode.ACTIVATED_FEATURES,
        alert_severity=AlertSeverity.CRITICAL,
        description=(
            f"The database '{dbname}' on '{hostname}' has enabled new features "
            f"({', '.join(features)}) on server"
        ),
        date=date or utcnow(),
        other_info={"hostname": hostname, "dbname": dbname, "features": list(features)},
    )


def unlisted_running_database(
    hostname: str, dbname: str, date: Optional[datetime] = None,
) -> Alert:
    return Alert(
        alert_affected_technology=TECHNOLOGY_ORACLE_DATABASE,
        alert_code=AlertCode.UNLISTED_RUNNING_DATABASE,
        alert_severity=AlertSeverity.WARNING,
        description=f"The database '{dbname}' is not listed in the oratab of the host {hostname}",
        date=date or utcnow(),
        other_info={"hostname": hostname, "dbname": dbname},
    )
