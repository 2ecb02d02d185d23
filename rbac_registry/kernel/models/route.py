"""
Route model: one (method, path, service) endpoint known to the registry.
"""

import uuid

from sqlalchemy import Boolean, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from rbac_registry.kernel.models.base import Base, generate_uuid


class Route(Base):
    """
    Registered route.

    The natural key (method, path, service) is what reconciliation upserts
    on; ``id`` is storage-internal and never changes once a row exists.
    """

    __tablename__ = "routes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    path: Mapped[str] = mapped_column(String(255), nullable=False)
    service: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    __table_args__ = (
        UniqueConstraint("method", "path", "service", name="uq_routes_method_path_service"),
    )

    def __repr__(self) -> str:
        return f"<Route {self.method} {self.path} service={self.service} active={self.active}>"
