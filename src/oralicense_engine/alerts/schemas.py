"""Pydantic schemas for engine-generated alerts."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from oralicense_engine.common.models import utcnow

TECHNOLOGY_ORACLE_DATABASE = "Oracle/Database"


class AlertCode(str, Enum):
    MISSING_PRIMARY_DATABASE = "MISSING_PRIMARY_DATABASE"
    NEW_DATABASE_DISCOVERED = "NEW_DATABASE"
    NEW_ENTERPRISE_LICENSE_REQUIRED = "NEW_LICENSE"
    ACTIVATED_FEATURES = "NEW_OPTION"
    UNLISTED_RUNNING_DATABASE = "UNLISTED_RUNNING_DATABASE"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    alert_category: str = "ENGINE"
    alert_affected_technology: Optional[str] = None
    alert_code: AlertCode
    alert_severity: AlertSeverity
    alert_status: str = "NEW"
    description: str
    date: datetime = Field(default_factory=utcnow)
    other_info: dict[str, Any] = Field(default_factory=dict)

    @property
    def hostname(self) -> str:
        return self.other_info.get("hostname", "")
