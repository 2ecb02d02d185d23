"""
Plain value copies of registry rows.

The store hands these out instead of ORM instances so callers never hold
anything bound to a session.
"""

import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RouteEntry:
    method: str
    path: str
    service: str
    active: bool = True
    id: Optional[uuid.UUID] = None

    @property
    def natural_key(self) -> tuple[str, str, str]:
        return (self.method, self.path, self.service)


@dataclass(frozen=True)
class RoleEntry:
    name: str
    id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class RbacEdge:
    route_id: uuid.UUID
    role_id: uuid.UUID
