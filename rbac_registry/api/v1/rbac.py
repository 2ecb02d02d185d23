"""
Rbac (grant) endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Query, status

from rbac_registry.api.deps import CurrentPrincipal, Facade
from rbac_registry.schemas import (
    AccessCheckResponse,
    RbacRequest,
    RbacResponse,
    SuccessResponse,
)

router = APIRouter()


@router.get("", response_model=List[RbacResponse])
async def list_rbac(facade: Facade, _: CurrentPrincipal):
    """List every grant."""
    return await facade.find_rbac()


@router.post("", response_model=RbacResponse, status_code=status.HTTP_201_CREATED)
async def add_rbac(data: RbacRequest, facade: Facade, _: CurrentPrincipal):
    """Grant a route to a role. Both must exist; repeats are no-ops."""
    return await facade.add_rbac(data)


@router.delete("", response_model=SuccessResponse)
async def delete_rbac(data: RbacRequest, facade: Facade, _: CurrentPrincipal):
    """Revoke a grant. Revoking a missing grant succeeds."""
    await facade.delete_rbac(data)
    return SuccessResponse(message="Authorization deleted successfully")


@router.get("/check", response_model=AccessCheckResponse)
async def check_access(
    facade: Facade,
    _: CurrentPrincipal,
    role_id: uuid.UUID,
    method: str = Query(..., min_length=1),
    path: str = Query(..., min_length=1),
    service: str = Query(..., min_length=1),
):
    """Whether a role may call an exact, active (method, path, service)."""
    return await facade.check_access(role_id, method, path, service)
