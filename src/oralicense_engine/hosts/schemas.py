"""Pydantic schemas for host inventory snapshots."""

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

from oralicense_engine.common.models import utcnow

DATABASE_STATUS_OPEN = "OPEN"
DATABASE_STATUS_MOUNTED = "MOUNTED"

DATABASE_ROLE_PRIMARY = "PRIMARY"
DATABASE_ROLE_PHYSICAL_STANDBY = "PHYSICAL STANDBY"
DATABASE_ROLE_LOGICAL_STANDBY = "LOGICAL STANDBY"
DATABASE_ROLE_SNAPSHOT_STANDBY = "SNAPSHOT STANDBY"


class DynamicModel(BaseModel):
    """Inventory record that preserves fields it does not declare.

    Unknown keys of the incoming document are kept in ``other_info`` and
    written back next to the declared fields on dump, so a snapshot
    survives a load/store round trip unchanged.
    """

    other_info: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _collect_unknown_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        known.update(f.alias for f in cls.model_fields.values() if f.alias)
        extras = {k: v for k, v in data.items() if k not in known}
        if not extras:
            return data
        cleaned = {k: v for k, v in data.items() if k in known}
        cleaned["other_info"] = {**(data.get("other_info") or {}), **extras}
        return cleaned

    @model_serializer(mode="wrap")
    def _merge_unknown_fields(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if isinstance(data, dict):
            for key, value in self.other_info.items():
                data.setdefault(key, value)
        return data


class LicenseEntry(DynamicModel):
    name: str
    count: float = Field(default=0.0, ge=0)
    license_type_id: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.count > 0


class DatabaseRecord(DynamicModel):
    name: str
    db_id: int = 0
    status: str = DATABASE_STATUS_OPEN
    role: str = DATABASE_ROLE_PRIMARY
    licenses: list[LicenseEntry] = Field(default_factory=list)

    @property
    def identity(self) -> tuple[int, str]:
        return self.db_id, self.name

    @property
    def is_secondary(self) -> bool:
        """Mounted non-primary databases carry derived licenses."""
        return self.status == DATABASE_STATUS_MOUNTED and self.role != DATABASE_ROLE_PRIMARY

    def license_counts(self) -> dict[str, float]:
        return {lic.name: lic.count for lic in self.licenses}


class HostInfo(DynamicModel):
    cpu_cores: int = Field(default=0, ge=0)
    cpu_sockets: int = Field(default=0, ge=0)
    hardware_abstraction_technology: str = "PH"


class HostSnapshot(DynamicModel):
    hostname: str = Field(..., min_length=1)
    environment: str = ""
    location: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    info: HostInfo = Field(default_factory=HostInfo)
    databases: list[DatabaseRecord] = Field(default_factory=list)
    unlisted_running_databases: list[str] = Field(default_factory=list)

    @field_validator("unlisted_running_databases")
    @classmethod
    def _dedupe_unlisted(cls, value: list[str]) -> list[str]:
        # A set on the wire; keep first-seen order
        return list(dict.fromkeys(value))

    def secondary_databases(self) -> list[DatabaseRecord]:
        return [db for db in self.databases if db.is_secondary]


class FleetDatabase(DatabaseRecord):
    """A database of the current fleet, tagged with its host."""

    hostname: str
    environment: str = ""


class IngestResponse(BaseModel):
    id: str
    hostname: str
    archived_previous: bool
    alert_codes: list[str] = []
    failed_alerts: int = 0
    degraded_checks: list[str] = []


class HostDataResponse(BaseModel):
    id: str
    hostname: str
    environment: str
    location: str = ""
    archived: bool
    created_at: datetime
    snapshot: dict[str, Any]
