"""
Entity Store - durable routes, roles and rbac edges.
"""

from rbac_registry.kernel.store.entries import RouteEntry, RoleEntry, RbacEdge
from rbac_registry.kernel.store.routes_store import RouteStore
from rbac_registry.kernel.store.roles_store import RoleStore
from rbac_registry.kernel.store.rbac_store import RbacStore

__all__ = [
    "RouteEntry",
    "RoleEntry",
    "RbacEdge",
    "RouteStore",
    "RoleStore",
    "RbacStore",
]
