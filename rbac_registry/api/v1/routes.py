"""
Route registry endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from rbac_registry.api.deps import CurrentPrincipal, Facade, RegistrationAllowed
from rbac_registry.config import get_settings
from rbac_registry.schemas import (
    ReconcileResponse,
    RouteCreate,
    RouteResponse,
    RouteSubmission,
    RouteUpdate,
    SuccessResponse,
)

router = APIRouter()


@router.get("", response_model=List[RouteResponse])
async def list_routes(facade: Facade, _: CurrentPrincipal):
    """List all registered routes, ordered by path then method."""
    return await facade.find_routes()


@router.get("/role/{role_id}", response_model=List[RouteResponse])
async def list_routes_for_role(role_id: uuid.UUID, facade: Facade, _: CurrentPrincipal):
    """Routes granted to a role. Unknown roles have none."""
    return await facade.routes_for_role(role_id)


@router.post("", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def add_route(data: RouteCreate, facade: Facade, _: CurrentPrincipal):
    """
    Register a single route.

    Upserts on (method, path, service): an existing route keeps its ID and
    only has its active flag overwritten.
    """
    return await facade.add_route(data)


# Must be declared before /{service} so it is not captured as a service name
@router.post(
    "/mark-active",
    response_model=ReconcileResponse,
    dependencies=[RegistrationAllowed],
)
async def mark_active(request: Request, facade: Facade):
    """Reconcile this registry's own routes from the endpoints it serves."""
    return await facade.mark_active(
        get_settings().service_name,
        request.app.state.live_endpoints,
    )


@router.post(
    "/{service}",
    response_model=ReconcileResponse,
    dependencies=[RegistrationAllowed],
)
async def reconcile_service(service: str, data: List[RouteSubmission], facade: Facade):
    """
    Replace a service's active route set.

    Every stored route of the service is deactivated, then each submitted
    route is upserted as active. Routes of other services are untouched.
    """
    return await facade.reconcile_service(service, data)


@router.put("/{route_id}", response_model=RouteResponse)
async def update_route(
    route_id: uuid.UUID,
    data: RouteUpdate,
    facade: Facade,
    _: CurrentPrincipal,
):
    """Overwrite a route's method, path, service and active flag."""
    return await facade.update_route(route_id, data)


@router.delete("/{route_id}", response_model=SuccessResponse)
async def delete_route(route_id: uuid.UUID, facade: Facade, _: CurrentPrincipal):
    """Delete a route and every grant of it."""
    await facade.delete_route(route_id)
    return SuccessResponse(message="Route deleted successfully")
