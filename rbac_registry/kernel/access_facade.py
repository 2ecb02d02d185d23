"""
Access facade: the one entry point the HTTP layer talks to.

Takes validated request schemas, drives the reconciler or the resolver and
shapes their results into response schemas.
"""

import uuid
from typing import Iterable, List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.kernel.permissions import AuthorizationResolver
from rbac_registry.kernel.registry import (
    LiveEndpoint,
    ReconcileResult,
    RegistryReconciler,
    ServiceLocks,
)
from rbac_registry.kernel.store import RbacEdge, RouteEntry
from rbac_registry.schemas import (
    AccessCheckResponse,
    RbacRequest,
    RbacResponse,
    ReconcileResponse,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
    RouteCreate,
    RouteResponse,
    RouteSubmission,
    RouteUpdate,
)


class AccessFacade:
    """
    Orchestrates registry operations for one request.

    Usage:
        facade = AccessFacade(session, get_service_locks())
        routes = await facade.find_routes()
    """

    def __init__(self, session: AsyncSession, locks: ServiceLocks):
        self.resolver = AuthorizationResolver(session)
        self.reconciler = RegistryReconciler(session, locks)

    # Routes

    async def find_routes(self) -> List[RouteResponse]:
        return _routes(await self.resolver.find_routes())

    async def routes_for_role(self, role_id: uuid.UUID) -> List[RouteResponse]:
        return _routes(await self.resolver.routes_for_role(role_id))

    async def add_route(self, data: RouteCreate) -> RouteResponse:
        route = await self.resolver.add_route(
            RouteEntry(
                id=data.id,
                method=data.method,
                path=data.path,
                service=data.service,
                active=data.active,
            )
        )
        return RouteResponse.model_validate(route)

    async def update_route(self, route_id: uuid.UUID, data: RouteUpdate) -> RouteResponse:
        route = await self.resolver.update_route(
            RouteEntry(
                id=route_id,
                method=data.method,
                path=data.path,
                service=data.service,
                active=data.active,
            )
        )
        return RouteResponse.model_validate(route)

    async def delete_route(self, route_id: uuid.UUID) -> None:
        await self.resolver.delete_route(route_id)

    async def reconcile_service(
        self,
        service: str,
        submissions: Sequence[RouteSubmission],
    ) -> ReconcileResponse:
        """Reconcile a service from a request body."""
        result = await self.reconciler.reconcile(
            service,
            [RouteEntry(method=s.method, path=s.path, service=service) for s in submissions],
        )
        return _reconcile_response(result)

    async def mark_active(
        self,
        service: str,
        endpoints: Iterable[LiveEndpoint],
    ) -> ReconcileResponse:
        """Reconcile this registry's own service from its live endpoints."""
        result = await self.reconciler.reconcile(
            service,
            [RouteEntry(method=e.method, path=e.path, service=service) for e in endpoints],
        )
        return _reconcile_response(result)

    # Roles

    async def find_roles(self) -> List[RoleResponse]:
        return [RoleResponse.model_validate(r) for r in await self.resolver.find_roles()]

    async def roles_for_route(self, route_id: uuid.UUID) -> List[RoleResponse]:
        return [RoleResponse.model_validate(r) for r in await self.resolver.roles_for_route(route_id)]

    async def add_role(self, data: RoleCreate) -> RoleResponse:
        return RoleResponse.model_validate(await self.resolver.add_role(data.name))

    async def update_role(self, role_id: uuid.UUID, data: RoleUpdate) -> RoleResponse:
        return RoleResponse.model_validate(await self.resolver.update_role(role_id, data.name))

    async def delete_role(self, role_id: uuid.UUID) -> None:
        await self.resolver.delete_role(role_id)

    # Rbac

    async def find_rbac(self) -> List[RbacResponse]:
        return [RbacResponse.model_validate(e) for e in await self.resolver.find_all_rbac()]

    async def add_rbac(self, data: RbacRequest) -> RbacResponse:
        edge = await self.resolver.add_rbac(RbacEdge(route_id=data.route_id, role_id=data.role_id))
        return RbacResponse.model_validate(edge)

    async def delete_rbac(self, data: RbacRequest) -> None:
        await self.resolver.delete_rbac(RbacEdge(route_id=data.route_id, role_id=data.role_id))

    async def check_access(
        self,
        role_id: uuid.UUID,
        method: str,
        path: str,
        service: str,
    ) -> AccessCheckResponse:
        permitted = await self.resolver.is_permitted(role_id, method, path, service)
        return AccessCheckResponse(
            role_id=role_id,
            method=method.strip().upper(),
            path=path.strip(),
            service=service.strip(),
            permitted=permitted,
        )


def _routes(routes: Iterable[RouteEntry]) -> List[RouteResponse]:
    return [RouteResponse.model_validate(r) for r in routes]


def _reconcile_response(result: ReconcileResult) -> ReconcileResponse:
    return ReconcileResponse(
        service=result.service,
        outcome=result.outcome,
        routes=_routes(result.routes),
        deactivated=result.deactivated,
        sweep_error=result.sweep_error,
    )
