"""
Role endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from rbac_registry.api.deps import CurrentPrincipal, Facade
from rbac_registry.schemas import RoleCreate, RoleResponse, RoleUpdate, SuccessResponse

router = APIRouter()


@router.get("", response_model=List[RoleResponse])
async def list_roles(facade: Facade, _: CurrentPrincipal):
    """List all roles by name."""
    return await facade.find_roles()


@router.get("/route/{route_id}", response_model=List[RoleResponse])
async def list_roles_for_route(route_id: uuid.UUID, facade: Facade, _: CurrentPrincipal):
    """Roles granted a route."""
    return await facade.roles_for_route(route_id)


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def add_role(data: RoleCreate, facade: Facade, _: CurrentPrincipal):
    """Create a role. An existing name returns the stored role."""
    return await facade.add_role(data)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: uuid.UUID,
    data: RoleUpdate,
    facade: Facade,
    _: CurrentPrincipal,
):
    """Rename a role."""
    return await facade.update_role(role_id, data)


@router.delete("/{role_id}", response_model=SuccessResponse)
async def delete_role(role_id: uuid.UUID, facade: Facade, _: CurrentPrincipal):
    """Delete a role and every grant it holds."""
    await facade.delete_role(role_id)
    return SuccessResponse(message="Role deleted successfully")
