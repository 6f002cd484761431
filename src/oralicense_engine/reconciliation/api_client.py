"""
ApiServiceClient — sync client for the fleet inventory API.

Fetches the fleet-wide database listing and the license type catalog
consumed by the reconciler. One attempt per call; timeouts come from the
underlying httpx transport.
"""

from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from oralicense_engine.common.exceptions import MalformedPayloadError, RemoteSourceError
from oralicense_engine.hosts.schemas import DatabaseRecord
from oralicense_engine.licensing.primary_lookup import is_primary_open
from oralicense_engine.licensing.schemas import LicenseTypeCatalogEntry


_DATABASES = TypeAdapter(list[DatabaseRecord])
_LICENSE_TYPES = TypeAdapter(list[LicenseTypeCatalogEntry])


class ApiServiceClient:
    """Synchronous HTTP client for the inventory API service."""

    def __init__(
        self,
        server_url: str = "http://localhost:8080",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self._http = httpx.Client(
            base_url=self.server_url,
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self.api_key:
            headers["X-OraLicense-Api-Key"] = self.api_key
        return headers

    def _get_json(self, path: str, what: str, **kwargs: Any) -> Any:
        try:
            resp = self._http.get(path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise RemoteSourceError(f"Can't retrieve {what}: {e}") from e

        if resp.status_code < 200 or resp.status_code > 299:
            raise RemoteSourceError(f"Can't retrieve {what}: HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Can't decode {what}: {e}") from e

    def get_primary_open_databases(self) -> list[DatabaseRecord]:
        """Return open primary databases across the current fleet."""
        payload = self._get_json(
            "/hosts/technologies/oracle/databases", "databases",
            params={"full": "true"},
        )
        try:
            dbs = _DATABASES.validate_python(payload)
        except ValidationError as e:
            raise MalformedPayloadError(f"Can't decode databases: {e}") from e
        return [db for db in dbs if is_primary_open(db)]

    def get_license_types(self, environment: str) -> list[LicenseTypeCatalogEntry]:
        """Return the Oracle database license type catalog."""
        payload = self._get_json(
            "/settings/oracle/database/license-types", "license types",
            params={"environment": environment} if environment else None,
        )
        try:
            return _LICENSE_TYPES.validate_python(payload)
        except ValidationError as e:
            raise MalformedPayloadError(f"Can't decode license types: {e}") from e

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()
