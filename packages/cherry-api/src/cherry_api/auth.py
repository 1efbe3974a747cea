"""API key authentication for routes that act on the ledger directly."""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .dependencies import Dependencies, get_deps

logger = logging.getLogger("cherry.api.auth")

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def get_caller(
    api_key: Optional[str] = Security(api_key_header),
    deps: Dependencies = Depends(get_deps),
) -> Optional[str]:
    """
    Resolve the caller identity from the X-API-Key header.

    Returns None when no key is sent; a ledger with an allowlist then
    refuses the call. Raises 401 for a key that is not configured.
    """
    if not api_key:
        return None

    for key, identity in deps.settings.caller_api_keys.items():
        if hmac.compare_digest(key.encode(), api_key.encode()):
            return identity

    logger.warning(f"Rejected unknown API key {api_key[:4]}...")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
        headers={"WWW-Authenticate": "ApiKey"},
    )
