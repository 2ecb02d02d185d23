"""
Rbac model: the role <-> route permission edge.
"""

import uuid

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rbac_registry.kernel.models.base import Base


class Rbac(Base):
    """
    Grant of one route to one role.

    Both foreign keys cascade, so deleting either endpoint removes the edge.
    """

    __tablename__ = "rbac"

    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("routes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Rbac route={self.route_id} role={self.role_id}>"
