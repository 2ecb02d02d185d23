"""
API v1 routes.
"""

from fastapi import APIRouter

from rbac_registry.api.v1 import rbac, roles, routes

router = APIRouter()

router.include_router(routes.router, prefix="/routes", tags=["Routes"])
router.include_router(roles.router, prefix="/roles", tags=["Roles"])
router.include_router(rbac.router, prefix="/rbac", tags=["Rbac"])
