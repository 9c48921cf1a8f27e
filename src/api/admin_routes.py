# src/api/admin_routes.py — v1
"""Administrative HTTP surface for the AI service.

Routes (prefix /api/admin/ai-service):
    GET  /status          flags, cache stats, queue load, provider stats
    POST /feature-flags   partial flag update
    POST /clear-cache     empty both cache tiers

Pattern:
    - LegalAIService stored in app.state.ai_service during lifespan
    - Dependency functions retrieve it from request.app.state
    - Authorization is delegated to require_admin, which host
      applications replace through app.dependency_overrides
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from pydantic import ValidationError

from lexassist.api.facade import LegalAIService
from lexassist.api.models import (
    ClearCacheResponse,
    FeatureFlagsUpdateRequest,
    FeatureFlagsUpdateResponse,
    ServiceStatus,
)

logger = logging.getLogger(__name__)


def require_admin() -> None:
    """Authorization hook. Denies every caller until a host overrides it.

    Raises:
        HTTPException: 403 unless overridden.
    """
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Administrator access required",
    )


def get_service(request: Request) -> LegalAIService:
    """Dependency injection for LegalAIService from app.state.

    Raises:
        RuntimeError: If the service is not initialized.
    """
    service = getattr(request.app.state, "ai_service", None)
    if service is None:
        raise RuntimeError("LegalAIService not initialized. Check lifespan setup.")
    return service


ServiceDep = Annotated[LegalAIService, Depends(get_service)]

router = APIRouter(
    prefix="/api/admin/ai-service",
    tags=["ai-admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/status", response_model=ServiceStatus)
async def get_status(service: ServiceDep) -> ServiceStatus:
    return await service.status()


@router.post("/feature-flags", response_model=FeatureFlagsUpdateResponse)
async def update_feature_flags(
    service: ServiceDep,
    payload: Annotated[dict[str, Any], Body()],
) -> FeatureFlagsUpdateResponse:
    """Apply a partial flag update. Malformed bodies and unknown flags are 400."""
    try:
        body = FeatureFlagsUpdateRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid feature flags format",
        ) from e

    try:
        flags = service.update_feature_flags(body.feature_flags)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return FeatureFlagsUpdateResponse(feature_flags=flags.as_public_dict())


@router.post("/clear-cache", response_model=ClearCacheResponse)
async def clear_cache(service: ServiceDep) -> ClearCacheResponse:
    return await service.clear_cache()
