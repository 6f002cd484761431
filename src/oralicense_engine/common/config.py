"""OraLicense-Engine configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "api_key": "insecure-admin-key-change-me",
}


class OraLicenseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ORALICENSE_")

    environment: str = "development"
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/oralicense.db"

    # API
    api_title: str = "OraLicense-Engine"
    api_version: str = "0.1.0"
    api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Remote collaborators
    api_service_url: str = "http://localhost:8080"
    api_service_key: str = ""  # empty: send api_key
    alert_service_url: str = "http://localhost:8081"
    alert_service_key: str = ""
    remote_timeout: float = 30.0  # seconds

    # License type ordering: metric names, highest priority first.
    # e.g. ORALICENSE_LICENSE_TYPE_METRICS_BY_ENVIRONMENT='{"TST": ["Named User Plus Perpetual"]}'
    license_type_metrics_by_environment: dict[str, list[str]] = {}
    license_type_metrics_default: list[str] = [
        "Processor Perpetual",
        "Named User Plus Perpetual",
        "Stream Perpetual",
        "Computer Perpetual",
    ]
    license_types_path: str = ""

    # Core factor per hardware abstraction technology, e.g. '{"VMWARE": 0.5}'
    core_factors: dict[str, float] = {}
    default_core_factor: float = 1.0

    @field_validator("core_factors")
    @classmethod
    def _check_core_factors(cls, value: dict[str, float]) -> dict[str, float]:
        for technology, factor in value.items():
            if not 0.0 <= factor <= 1.0:
                raise ValueError(
                    f"core factor for {technology!r} must be within [0, 1], got {factor}"
                )
        return value

    @field_validator("default_core_factor")
    @classmethod
    def _check_default_core_factor(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"default core factor must be within [0, 1], got {value}")
        return value

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"ORALICENSE_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}."
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default API key — set ORALICENSE_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> OraLicenseSettings:
    settings = OraLicenseSettings()
    settings.validate_for_production()
    return settings
