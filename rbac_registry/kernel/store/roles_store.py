"""
Role persistence.
"""

import uuid
from typing import List

from sqlalchemy import delete, exists, select, update

from rbac_registry.database import dialect_insert
from rbac_registry.errors import NotFoundError
from rbac_registry.kernel.models import Rbac, Role, generate_uuid
from rbac_registry.kernel.store.base import BaseStore
from rbac_registry.kernel.store.entries import RoleEntry
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)

roles_table = Role.__table__
rbac_table = Rbac.__table__

_COLUMNS = (roles_table.c.id, roles_table.c.name)


def _to_entry(row) -> RoleEntry:
    return RoleEntry(id=row.id, name=row.name)


class RoleStore(BaseStore):
    """Reads and writes rows of the roles table."""

    async def exists(self, role_id: uuid.UUID) -> bool:
        async with self._statement("ROLE_EXISTS_BY_ID", "failed to check if role exists"):
            result = await self.session.execute(
                select(exists().where(roles_table.c.id == role_id))
            )
            return bool(result.scalar())

    async def add(self, role: RoleEntry) -> RoleEntry:
        """Insert a role, or return the stored one when the name is taken."""
        insert = dialect_insert(self.session)
        stmt = insert(roles_table).values(
            id=role.id or generate_uuid(),
            name=role.name,
        )
        # No-op update so RETURNING yields the existing row on conflict
        stmt = stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={"name": stmt.excluded.name},
        ).returning(*_COLUMNS)

        async with self._statement("ADD_ROLE", "failed to add role"):
            row = (await self.session.execute(stmt)).one()
        return _to_entry(row)

    async def update(self, role: RoleEntry) -> RoleEntry:
        stmt = (
            update(roles_table)
            .where(roles_table.c.id == role.id)
            .values(name=role.name)
            .returning(*_COLUMNS)
        )
        async with self._statement(
            "UPDATE_ROLE",
            "failed to update role",
            conflict="role with the given name already exists",
        ):
            row = (await self.session.execute(stmt)).one_or_none()

        if row is None:
            raise NotFoundError("role does not exist")
        return _to_entry(row)

    async def delete(self, role_id: uuid.UUID) -> None:
        async with self._statement("DELETE_ROLE", "failed to delete role"):
            await self.session.execute(
                delete(roles_table).where(roles_table.c.id == role_id)
            )

    async def find(self) -> List[RoleEntry]:
        stmt = select(*_COLUMNS).order_by(roles_table.c.name)
        async with self._statement("FIND_ROLES", "failed to find roles"):
            rows = (await self.session.execute(stmt)).all()
        logger.debug("Retrieved %d roles", len(rows))
        return [_to_entry(row) for row in rows]

    async def find_by_route(self, route_id: uuid.UUID) -> List[RoleEntry]:
        stmt = (
            select(*_COLUMNS)
            .join(rbac_table, rbac_table.c.role_id == roles_table.c.id)
            .where(rbac_table.c.route_id == route_id)
            .order_by(roles_table.c.name)
        )
        async with self._statement("FIND_ROLES_BY_ROUTE_ID", "failed to find roles for route"):
            rows = (await self.session.execute(stmt)).all()
        return [_to_entry(row) for row in rows]
