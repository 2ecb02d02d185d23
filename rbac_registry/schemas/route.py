"""
Route schemas.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from rbac_registry.kernel.registry import ReconcileOutcome

HTTP_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"}
)


class RouteFields(BaseModel):
    """Method and path shared by every route payload."""

    method: str = Field(..., max_length=10)
    path: str = Field(..., min_length=1, max_length=255)

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {v or '<empty>'}")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Path must not be empty")
        return v


class RouteSubmission(RouteFields):
    """
    One entry of a reconciliation body.

    ``active`` is accepted and ignored: reconciled routes are always stored
    active, under the service named in the URL.
    """

    active: bool = True


class RouteUpdate(RouteFields):
    """Route update request; the ID comes from the path."""

    service: str = Field(..., min_length=1)
    active: bool = True

    @field_validator("service")
    @classmethod
    def validate_service(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Service must not be empty")
        return v


class RouteCreate(RouteUpdate):
    """Single route registration request."""

    id: Optional[uuid.UUID] = None


class RouteResponse(BaseModel):
    """Route as stored."""

    id: uuid.UUID
    method: str
    path: str
    service: str
    active: bool

    class Config:
        from_attributes = True


class ReconcileResponse(BaseModel):
    """Outcome of a service reconciliation."""

    service: str
    outcome: ReconcileOutcome
    routes: List[RouteResponse]
    deactivated: Optional[int] = None
    sweep_error: Optional[str] = None

    class Config:
        from_attributes = True
