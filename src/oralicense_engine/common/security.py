"""API key check for the host data and settings endpoints."""

import hmac
from typing import Optional

from fastapi import Header, HTTPException

API_KEY_HEADER = "X-OraLicense-Api-Key"


async def require_api_key(
    api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
) -> str:
    """Reject requests without the configured key (401 missing, 403 wrong)."""
    from oralicense_engine.common.config import get_settings

    if not api_key:
        raise HTTPException(status_code=401, detail=f"Missing {API_KEY_HEADER} header")
    if not hmac.compare_digest(api_key.encode(), get_settings().api_key.encode()):
        raise HTTPException(status_code=403, detail="Invalid API key")
    return api_key
