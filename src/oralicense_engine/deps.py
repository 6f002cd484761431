"""Dependency injection singletons for OraLicense-Engine."""

from oralicense_engine.alerts.client import AlertServiceClient
from oralicense_engine.common.config import get_settings
from oralicense_engine.common.database import DatabaseManager
from oralicense_engine.hosts.service import HostDataService
from oralicense_engine.reconciliation.api_client import ApiServiceClient
from oralicense_engine.reconciliation.engine import Reconciler

_db: DatabaseManager | None = None
_api_client: ApiServiceClient | None = None
_alert_client: AlertServiceClient | None = None
_reconciler: Reconciler | None = None
_host_data: HostDataService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_api_service_client() -> ApiServiceClient:
    global _api_client
    if _api_client is None:
        settings = get_settings()
        _api_client = ApiServiceClient(
            settings.api_service_url,
            # Defaults to this service; reuse its own key unless one is given
            api_key=settings.api_service_key or settings.api_key,
            timeout=settings.remote_timeout,
        )
    return _api_client


def get_alert_service_client() -> AlertServiceClient:
    global _alert_client
    if _alert_client is None:
        settings = get_settings()
        _alert_client = AlertServiceClient(
            settings.alert_service_url,
            api_key=settings.alert_service_key or None,
            timeout=settings.remote_timeout,
        )
    return _alert_client


def get_reconciler() -> Reconciler:
    global _reconciler
    if _reconciler is None:
        api_client = get_api_service_client()
        _reconciler = Reconciler.from_settings(
            get_settings(),
            fleet_source=api_client,
            license_type_source=api_client,
            alert_emitter=get_alert_service_client(),
        )
    return _reconciler


def get_host_data_service() -> HostDataService:
    global _host_data
    if _host_data is None:
        _host_data = HostDataService(get_settings(), reconciler=get_reconciler())
    return _host_data


def set_reconciler(reconciler: Reconciler | None) -> None:
    """Replace the reconciler used by the host data service (for testing)."""
    global _reconciler, _host_data
    _reconciler = reconciler
    _host_data = HostDataService(get_settings(), reconciler=reconciler)


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _api_client, _alert_client, _reconciler, _host_data
    if _api_client is not None:
        _api_client.close()
    if _alert_client is not None:
        _alert_client.close()
    _db = None
    _api_client = None
    _alert_client = None
    _reconciler = None
    _host_data = None
