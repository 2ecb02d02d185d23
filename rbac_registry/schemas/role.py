"""
Role schemas.
"""

import uuid

from pydantic import BaseModel, Field, field_validator


class RoleCreate(BaseModel):
    """Role creation request."""

    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Role name must not be empty")
        return v


class RoleUpdate(RoleCreate):
    """Role rename request."""


class RoleResponse(BaseModel):
    """Role as stored."""

    id: uuid.UUID
    name: str

    class Config:
        from_attributes = True
