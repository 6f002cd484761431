"""Host data service — ingest, archive and query host snapshots."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from oralicense_engine.common.config import OraLicenseSettings
from oralicense_engine.common.exceptions import HostNotFoundError
from oralicense_engine.hosts.models import HostDataModel
from oralicense_engine.hosts.schemas import FleetDatabase, HostSnapshot
from oralicense_engine.reconciliation.engine import ReconciliationReport, Reconciler

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    row: HostDataModel
    report: Optional[ReconciliationReport]
    archived_previous: bool


class HostDataService:
    """Append-only store of host snapshots with one current row per hostname."""

    def __init__(self, settings: OraLicenseSettings, reconciler: Reconciler | None = None):
        self.settings = settings
        self.reconciler = reconciler

    # ── Write ──

    async def insert_hostdata(
        self,
        session: AsyncSession,
        snapshot: HostSnapshot,
    ) -> IngestResult:
        """
        Store a new snapshot as the host's current one.

        The previous current snapshot (if any) is reconciled against the new
        one, then archived. The reconciler blocks on remote fetches, so it
        runs in a worker thread.
        """
        previous_row = await self._get_current_row(session, snapshot.hostname)
        previous = None
        if previous_row is not None:
            previous = HostSnapshot.model_validate(previous_row.data)

        report = None
        if self.reconciler is not None:
            report = await asyncio.to_thread(self.reconciler.reconcile, previous, snapshot)

        if previous_row is not None:
            previous_row.archived = True
            await session.flush()

        row = HostDataModel(
            hostname=snapshot.hostname,
            environment=snapshot.environment,
            location=snapshot.location,
            archived=False,
            data=snapshot.model_dump(mode="json"),
        )
        session.add(row)
        await session.flush()

        logger.info(
            "Inserted hostdata %s for host %s", row.id, snapshot.hostname,
            extra={"hostname": snapshot.hostname},
        )
        return IngestResult(row=row, report=report, archived_previous=previous_row is not None)

    async def archive_host(self, session: AsyncSession, hostname: str) -> HostDataModel:
        row = await self._get_current_row(session, hostname)
        if row is None:
            raise HostNotFoundError(f"Host {hostname} not found")
        row.archived = True
        await session.flush()
        return row

    # ── Read ──

    async def _get_current_row(
        self, session: AsyncSession, hostname: str,
    ) -> Optional[HostDataModel]:
        result = await session.execute(
            select(HostDataModel).where(
                HostDataModel.hostname == hostname,
                HostDataModel.archived.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def exist_hostdata(self, session: AsyncSession, hostname: str) -> bool:
        return await self._get_current_row(session, hostname) is not None

    async def get_current_hostdata(
        self,
        session: AsyncSession,
        hostname: str,
        older_than: Optional[datetime] = None,
    ) -> HostDataModel:
        """Current row, or with ``older_than`` the latest row stored before it."""
        if older_than is None:
            row = await self._get_current_row(session, hostname)
        else:
            result = await session.execute(
                select(HostDataModel)
                .where(
                    HostDataModel.hostname == hostname,
                    HostDataModel.created_at < _as_utc(older_than),
                )
                .order_by(HostDataModel.created_at.desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise HostNotFoundError(f"Host {hostname} not found")
        return row

    async def get_current_host(self, session: AsyncSession, hostname: str) -> HostSnapshot:
        row = await self.get_current_hostdata(session, hostname)
        return HostSnapshot.model_validate(row.data)

    async def list_current_oracle_databases(
        self,
        session: AsyncSession,
        environment: str | None = None,
    ) -> list[FleetDatabase]:
        """Every database of every current host, tagged with its hostname."""
        query = select(HostDataModel).where(HostDataModel.archived.is_(False))
        if environment is not None:
            query = query.where(HostDataModel.environment == environment)
        query = query.order_by(HostDataModel.hostname)
        result = await session.execute(query)

        databases = []
        for row in result.scalars().all():
            snapshot = HostSnapshot.model_validate(row.data)
            for db in snapshot.databases:
                data = db.model_dump()
                data.update(hostname=snapshot.hostname, environment=snapshot.environment)
                databases.append(FleetDatabase.model_validate(data))
        return databases

    async def _rows_as_of(
        self,
        session: AsyncSession,
        location: Optional[str] = None,
        environment: Optional[str] = None,
        older_than: Optional[datetime] = None,
    ) -> list[HostDataModel]:
        """One row per host: the current one, or the latest stored before ``older_than``."""
        if older_than is None:
            query = select(HostDataModel).where(HostDataModel.archived.is_(False))
        else:
            latest = (
                select(
                    HostDataModel.hostname,
                    func.max(HostDataModel.created_at).label("created_at"),
                )
                .where(HostDataModel.created_at < _as_utc(older_than))
                .group_by(HostDataModel.hostname)
                .subquery()
            )
            query = select(HostDataModel).join(
                latest,
                and_(
                    HostDataModel.hostname == latest.c.hostname,
                    HostDataModel.created_at == latest.c.created_at,
                ),
            )
        if location is not None:
            query = query.where(HostDataModel.location == location)
        if environment is not None:
            query = query.where(HostDataModel.environment == environment)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def list_locations(
        self,
        session: AsyncSession,
        location: Optional[str] = None,
        environment: Optional[str] = None,
        older_than: Optional[datetime] = None,
    ) -> list[str]:
        rows = await self._rows_as_of(session, location, environment, older_than)
        return sorted({row.location for row in rows})

    async def list_environments(
        self,
        session: AsyncSession,
        location: Optional[str] = None,
        environment: Optional[str] = None,
        older_than: Optional[datetime] = None,
    ) -> list[str]:
        rows = await self._rows_as_of(session, location, environment, older_than)
        return sorted({row.environment for row in rows})


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken as UTC, like the stored created_at values
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
