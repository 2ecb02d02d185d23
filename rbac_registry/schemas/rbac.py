"""
Rbac (grant) schemas.
"""

import uuid

from pydantic import BaseModel


class RbacRequest(BaseModel):
    """Grant or revoke one route for one role."""

    route_id: uuid.UUID
    role_id: uuid.UUID


class RbacResponse(BaseModel):
    """A stored grant."""

    route_id: uuid.UUID
    role_id: uuid.UUID

    class Config:
        from_attributes = True


class AccessCheckResponse(BaseModel):
    """Answer to "may this role call this route"."""

    role_id: uuid.UUID
    method: str
    path: str
    service: str
    permitted: bool
