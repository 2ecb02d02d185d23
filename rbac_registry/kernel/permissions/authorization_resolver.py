"""
Authorization resolver for role <-> route grants.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.errors import NotFoundError, ValidationError
from rbac_registry.kernel.store import (
    RbacEdge,
    RbacStore,
    RoleEntry,
    RoleStore,
    RouteEntry,
    RouteStore,
)
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)


class AuthorizationResolver:
    """
    Service for managing roles, routes and the grants between them.

    Implements flat RBAC:
    - Direct role and route management
    - Edge creation only when both endpoints exist
    - Join queries in both directions
    """

    def __init__(self, session: AsyncSession):
        self.routes = RouteStore(session)
        self.roles = RoleStore(session)
        self.rbac = RbacStore(session)

    # Roles

    async def add_role(self, name: str) -> RoleEntry:
        """
        Create a role, returning the existing one if the name is taken.

        Raises:
            ValidationError: If name is blank
        """
        name = _require_name(name)
        role = await self.roles.add(RoleEntry(name=name))
        logger.info("Role %s ready", role.name, extra={"role_id": str(role.id)})
        return role

    async def update_role(self, role_id: uuid.UUID, name: str) -> RoleEntry:
        """
        Rename a role.

        Raises:
            ValidationError: If name is blank
            NotFoundError: If no role has this ID
            ConflictError: If another role already has the name
        """
        return await self.roles.update(RoleEntry(id=role_id, name=_require_name(name)))

    async def delete_role(self, role_id: uuid.UUID) -> None:
        """Delete a role and its grants. Unknown IDs are a no-op."""
        await self.roles.delete(role_id)

    async def find_roles(self) -> List[RoleEntry]:
        return await self.roles.find()

    # Routes

    async def add_route(self, route: RouteEntry) -> RouteEntry:
        """
        Register a single route (upsert on method, path, service).

        Args:
            route: Route to store; a missing ID is generated by the store

        Returns:
            The route as stored, carrying the stored ID on conflict
        """
        return await self.routes.add(_require_route(route))

    async def update_route(self, route: RouteEntry) -> RouteEntry:
        """
        Overwrite a route's fields by ID.

        Raises:
            NotFoundError: If no route has this ID
            ConflictError: If the new natural key belongs to another route
        """
        if route.id is None:
            raise ValidationError("route id is required")
        return await self.routes.update(_require_route(route))

    async def delete_route(self, route_id: uuid.UUID) -> None:
        """Delete a route and its grants. Unknown IDs are a no-op."""
        await self.routes.delete(route_id)

    async def find_routes(self) -> List[RouteEntry]:
        return await self.routes.find()

    # Grants

    async def add_rbac(self, edge: RbacEdge) -> RbacEdge:
        """
        Grant a route to a role.

        The route is checked before the role. Granting an existing edge
        again is a no-op.

        Raises:
            NotFoundError: If the route or the role does not exist
        """
        if not await self.routes.exists(edge.route_id):
            raise NotFoundError("route does not exist")
        if not await self.roles.exists(edge.role_id):
            raise NotFoundError("role does not exist")

        await self.rbac.add(edge)
        logger.info(
            "Granted route to role",
            extra={"route_id": str(edge.route_id), "role_id": str(edge.role_id)},
        )
        return edge

    async def delete_rbac(self, edge: RbacEdge) -> None:
        await self.rbac.delete(edge)

    async def find_all_rbac(self) -> List[RbacEdge]:
        return await self.rbac.find()

    async def routes_for_role(self, role_id: uuid.UUID) -> List[RouteEntry]:
        """Routes granted to a role; an unknown role simply has none."""
        return await self.routes.find_by_role(role_id)

    async def roles_for_route(self, route_id: uuid.UUID) -> List[RoleEntry]:
        """Roles granted a route; an unknown route simply has none."""
        return await self.roles.find_by_route(route_id)

    async def is_permitted(
        self,
        role_id: uuid.UUID,
        method: str,
        path: str,
        service: str,
    ) -> bool:
        """
        Check whether a role may invoke an exact (method, path, service).

        Inactive routes never grant access.
        """
        key = (method.strip().upper(), path.strip(), service.strip())
        return any(
            route.active and route.natural_key == key
            for route in await self.routes.find_by_role(role_id)
        )


def _require_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("role name is required")
    return name


def _require_route(route: RouteEntry) -> RouteEntry:
    method = (route.method or "").strip().upper()
    path = (route.path or "").strip()
    service = (route.service or "").strip()
    if not method or not path or not service:
        raise ValidationError("method, path and service are required")
    return RouteEntry(
        id=route.id,
        method=method,
        path=path,
        service=service,
        active=route.active,
    )
