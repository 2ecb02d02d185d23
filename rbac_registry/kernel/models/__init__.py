"""
Registry data models.

SQLAlchemy tables for routes, roles and the rbac relation between them.
"""

from rbac_registry.kernel.models.base import Base, generate_uuid
from rbac_registry.kernel.models.route import Route
from rbac_registry.kernel.models.role import Role
from rbac_registry.kernel.models.rbac import Rbac

__all__ = [
    "Base",
    "generate_uuid",
    "Route",
    "Role",
    "Rbac",
]
