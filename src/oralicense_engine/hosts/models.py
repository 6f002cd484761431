"""SQLAlchemy models for stored host snapshots."""

from sqlalchemy import JSON, Boolean, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from oralicense_engine.common.models import Base, TimestampMixin, generate_uuid


class HostDataModel(Base, TimestampMixin):
    __tablename__ = "hostdata"
    __table_args__ = (
        # Partial index: at most one current (non-archived) snapshot per hostname
        Index(
            "uq_hostdata_current_hostname",
            "hostname",
            unique=True,
            sqlite_where=text("archived = 0"),
            postgresql_where=text("archived = false"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    hostname: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    environment: Mapped[str] = mapped_column(String(100), default="", index=True)
    location: Mapped[str] = mapped_column(String(100), default="", index=True)
    archived: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    data: Mapped[dict] = mapped_column(JSON, default=dict)
