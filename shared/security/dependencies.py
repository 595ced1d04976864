"""
Request-level security dependencies.

Authentication happens upstream: the gateway resolves the caller and forwards
the merchant identity in X-Merchant-ID. Service-to-service calls additionally
carry X-Internal-API-Key.
"""
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .api_key import verify_api_key

logger = structlog.get_logger(__name__)

# Defines the expected internal service header
api_key_header = APIKeyHeader(name="X-Internal-API-Key", auto_error=False)

# Set by the upstream authentication gateway
merchant_id_header = APIKeyHeader(name="X-Merchant-ID", auto_error=False)


async def verify_internal_api_key(
    request: Request, api_key: Optional[str] = Depends(api_key_header)
) -> bool:
    """Dependency to validate service-to-service internal requests."""
    if not verify_api_key(api_key, request.app.state.settings.internal_api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing X-Internal-API-Key header"
        )
    return True


async def get_merchant_id(merchant_id: Optional[str] = Depends(merchant_id_header)) -> str:
    """Dependency returning the caller's merchant identity, or 401 if absent."""
    if not merchant_id or not merchant_id.strip():
        logger.error("missing_merchant_id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing merchant_id",
        )
    return merchant_id.strip()
