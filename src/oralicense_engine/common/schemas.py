"""Service-level response schemas."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = "ok"
    version: str
    environment: str
    database: Literal["ok", "unavailable"] = "ok"
    service: str = "oralicense-engine"
