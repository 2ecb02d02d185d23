"""
Snapshot of the endpoints this process actually serves.

Taken once at startup from the FastAPI route table and never mutated; the
persisted registry is a separate thing owned by the store.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

from fastapi.routing import APIRoute
from starlette.routing import BaseRoute


@dataclass(frozen=True, order=True)
class LiveEndpoint:
    path: str
    method: str


def collect_live_endpoints(routes: Iterable[BaseRoute]) -> Tuple[LiveEndpoint, ...]:
    """
    Flatten API routes into sorted, de-duplicated (path, method) pairs.

    Only ``APIRoute`` instances count; docs, static mounts and other
    framework routes are left out.
    """
    endpoints = {
        LiveEndpoint(path=route.path, method=method.upper())
        for route in routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }
    return tuple(sorted(endpoints))
