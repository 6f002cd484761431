"""License type catalog API router."""

from fastapi import APIRouter, Depends, Query

from oralicense_engine.common.config import get_settings
from oralicense_engine.common.security import require_api_key
from oralicense_engine.licensing.catalog import get_license_types_catalog
from oralicense_engine.licensing.license_types import rank_license_types
from oralicense_engine.licensing.schemas import LicenseTypeCatalogEntry

router = APIRouter()


@router.get(
    "/settings/oracle/database/license-types",
    response_model=list[LicenseTypeCatalogEntry],
)
async def list_license_types(
    environment: str | None = Query(None),
    _=Depends(require_api_key),
):
    settings = get_settings()
    catalog = get_license_types_catalog(settings.license_types_path)
    if environment is None:
        return list(catalog)
    return rank_license_types(
        catalog,
        environment,
        settings.license_type_metrics_by_environment,
        settings.license_type_metrics_default,
    )
