"""
Rbac edge persistence.
"""

from typing import List

from sqlalchemy import delete, select

from rbac_registry.database import dialect_insert
from rbac_registry.kernel.models import Rbac
from rbac_registry.kernel.store.base import BaseStore
from rbac_registry.kernel.store.entries import RbacEdge
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)

rbac_table = Rbac.__table__


class RbacStore(BaseStore):
    """Reads and writes rows of the rbac table."""

    async def add(self, edge: RbacEdge) -> None:
        insert = dialect_insert(self.session)
        stmt = insert(rbac_table).values(
            route_id=edge.route_id,
            role_id=edge.role_id,
        ).on_conflict_do_nothing(index_elements=["route_id", "role_id"])

        async with self._statement("ADD_RBAC", "failed to add rbac record"):
            await self.session.execute(stmt)

    async def delete(self, edge: RbacEdge) -> None:
        stmt = delete(rbac_table).where(
            rbac_table.c.route_id == edge.route_id,
            rbac_table.c.role_id == edge.role_id,
        )
        async with self._statement("DELETE_RBAC", "failed to delete rbac record"):
            await self.session.execute(stmt)

    async def find(self) -> List[RbacEdge]:
        stmt = select(rbac_table.c.route_id, rbac_table.c.role_id).order_by(
            rbac_table.c.route_id, rbac_table.c.role_id
        )
        async with self._statement("FIND_RBAC", "failed to find rbac records"):
            rows = (await self.session.execute(stmt)).all()
        logger.debug("Retrieved %d rbac records", len(rows))
        return [RbacEdge(route_id=row.route_id, role_id=row.role_id) for row in rows]
