"""
Pydantic schemas for API request/response validation.
"""

from rbac_registry.schemas.common import ErrorResponse, HealthResponse, SuccessResponse
from rbac_registry.schemas.rbac import AccessCheckResponse, RbacRequest, RbacResponse
from rbac_registry.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from rbac_registry.schemas.route import (
    ReconcileResponse,
    RouteCreate,
    RouteResponse,
    RouteSubmission,
    RouteUpdate,
)

__all__ = [
    # Common
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
    # Routes
    "RouteCreate",
    "RouteUpdate",
    "RouteSubmission",
    "RouteResponse",
    "ReconcileResponse",
    # Roles
    "RoleCreate",
    "RoleUpdate",
    "RoleResponse",
    # Rbac
    "RbacRequest",
    "RbacResponse",
    "AccessCheckResponse",
]
