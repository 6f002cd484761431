"""Host data API router."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from oralicense_engine.common.exceptions import HostNotFoundError
from oralicense_engine.common.security import require_api_key
from oralicense_engine.hosts.models import HostDataModel
from oralicense_engine.hosts.schemas import HostDataResponse, HostSnapshot, IngestResponse

router = APIRouter()


def _get_service():
    from oralicense_engine.deps import get_host_data_service
    return get_host_data_service()


def _get_db():
    from oralicense_engine.deps import get_db
    return get_db()


def _to_response(row: HostDataModel) -> HostDataResponse:
    return HostDataResponse(
        id=row.id,
        hostname=row.hostname,
        environment=row.environment,
        location=row.location,
        archived=row.archived,
        created_at=row.created_at,
        snapshot=row.data or {},
    )


@router.post("/hosts", response_model=IngestResponse, status_code=201)
async def insert_hostdata(
    body: HostSnapshot,
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        result = await svc.insert_hostdata(session, body)
        report = result.report
        return IngestResponse(
            id=result.row.id,
            hostname=result.row.hostname,
            archived_previous=result.archived_previous,
            alert_codes=report.alert_codes if report else [],
            failed_alerts=len(report.failed_alerts) if report else 0,
            degraded_checks=report.degraded_checks if report else [],
        )


@router.get("/hosts/technologies/oracle/databases")
async def list_oracle_databases(
    environment: str | None = Query(None),
    _=Depends(require_api_key),
) -> list[dict[str, Any]]:
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        databases = await svc.list_current_oracle_databases(session, environment=environment)
        return [d.model_dump(mode="json") for d in databases]


@router.get("/hosts/locations")
async def list_locations(
    location: str | None = Query(None),
    environment: str | None = Query(None),
    older_than: datetime | None = Query(None),
    _=Depends(require_api_key),
) -> list[str]:
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        return await svc.list_locations(
            session, location=location, environment=environment, older_than=older_than,
        )


@router.get("/hosts/environments")
async def list_environments(
    location: str | None = Query(None),
    environment: str | None = Query(None),
    older_than: datetime | None = Query(None),
    _=Depends(require_api_key),
) -> list[str]:
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        return await svc.list_environments(
            session, location=location, environment=environment, older_than=older_than,
        )


@router.get("/hosts/{hostname}", response_model=HostDataResponse)
async def get_host(
    hostname: str,
    older_than: datetime | None = Query(None),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        try:
            row = await svc.get_current_hostdata(session, hostname, older_than=older_than)
        except HostNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message)
        return _to_response(row)


@router.delete("/hosts/{hostname}", response_model=HostDataResponse)
async def archive_host(
    hostname: str,
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        try:
            row = await svc.archive_host(session, hostname)
        except HostNotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message)
        return _to_response(row)
