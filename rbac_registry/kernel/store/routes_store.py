"""
Route persistence.
"""

import uuid
from typing import List

from sqlalchemy import exists, select, update, delete

from rbac_registry.database import dialect_insert
from rbac_registry.errors import NotFoundError
from rbac_registry.kernel.models import Rbac, Route, generate_uuid
from rbac_registry.kernel.store.base import BaseStore
from rbac_registry.kernel.store.entries import RouteEntry
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)

routes_table = Route.__table__
rbac_table = Rbac.__table__

_COLUMNS = (
    routes_table.c.id,
    routes_table.c.method,
    routes_table.c.path,
    routes_table.c.service,
    routes_table.c.active,
)


def _to_entry(row) -> RouteEntry:
    return RouteEntry(
        id=row.id,
        method=row.method,
        path=row.path,
        service=row.service,
        active=row.active,
    )


class RouteStore(BaseStore):
    """Reads and writes rows of the routes table."""

    async def exists(self, route_id: uuid.UUID) -> bool:
        async with self._statement("ROUTE_EXISTS_BY_ID", "failed to check if route exists"):
            result = await self.session.execute(
                select(exists().where(routes_table.c.id == route_id))
            )
            return bool(result.scalar())

    async def add(self, route: RouteEntry) -> RouteEntry:
        """
        Upsert a route on (method, path, service).

        A new row takes the submitted ID (or a fresh one). An existing row
        only has its ``active`` flag overwritten and keeps its stored ID,
        which is what gets returned.
        """
        insert = dialect_insert(self.session)
        stmt = insert(routes_table).values(
            id=route.id or generate_uuid(),
            method=route.method,
            path=route.path,
            service=route.service,
            active=route.active,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["method", "path", "service"],
            set_={"active": stmt.excluded.active},
        ).returning(*_COLUMNS)

        async with self._statement(
            "ADD_ROUTE",
            "failed to add route",
            conflict="route with the given id already exists",
        ):
            row = (await self.session.execute(stmt)).one()
        return _to_entry(row)

    async def update(self, route: RouteEntry) -> RouteEntry:
        stmt = (
            update(routes_table)
            .where(routes_table.c.id == route.id)
            .values(
                method=route.method,
                path=route.path,
                service=route.service,
                active=route.active,
            )
            .returning(*_COLUMNS)
        )
        async with self._statement(
            "UPDATE_ROUTE",
            "failed to update route",
            conflict="route with the given method, path and service already exists",
        ):
            row = (await self.session.execute(stmt)).one_or_none()

        if row is None:
            raise NotFoundError("route does not exist")
        return _to_entry(row)

    async def delete(self, route_id: uuid.UUID) -> None:
        # rbac rows go with it through ON DELETE CASCADE
        async with self._statement("DELETE_ROUTE", "failed to delete route"):
            await self.session.execute(
                delete(routes_table).where(routes_table.c.id == route_id)
            )

    async def find(self) -> List[RouteEntry]:
        stmt = select(*_COLUMNS).order_by(routes_table.c.path, routes_table.c.method)
        async with self._statement("FIND_ROUTES", "failed to fetch routes"):
            rows = (await self.session.execute(stmt)).all()
        logger.debug("Retrieved %d routes", len(rows))
        return [_to_entry(row) for row in rows]

    async def find_by_role(self, role_id: uuid.UUID) -> List[RouteEntry]:
        stmt = (
            select(*_COLUMNS)
            .join(rbac_table, rbac_table.c.route_id == routes_table.c.id)
            .where(rbac_table.c.role_id == role_id)
            .order_by(routes_table.c.path, routes_table.c.method)
        )
        async with self._statement("FIND_ROUTES_BY_ROLE_ID", "failed to find routes for role"):
            rows = (await self.session.execute(stmt)).all()
        return [_to_entry(row) for row in rows]

    async def find_by_service(
        self,
        service: str,
        active_only: bool = False,
    ) -> List[RouteEntry]:
        stmt = select(*_COLUMNS).where(routes_table.c.service == service)
        if active_only:
            stmt = stmt.where(routes_table.c.active.is_(True))
        stmt = stmt.order_by(routes_table.c.path, routes_table.c.method)
        async with self._statement("FIND_ROUTES_BY_SERVICE", "failed to find routes for service"):
            rows = (await self.session.execute(stmt)).all()
        return [_to_entry(row) for row in rows]

    async def set_inactive(self, service: str) -> int:
        """Deactivate every route of ``service``; returns the rows touched."""
        stmt = (
            update(routes_table)
            .where(routes_table.c.service == service)
            .values(active=False)
        )
        async with self._statement("SET_ROUTES_INACTIVE", "failed to set routes inactive"):
            touched = (await self.session.execute(stmt)).rowcount
        return touched
