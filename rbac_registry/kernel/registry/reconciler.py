"""
Registry reconciliation: converge a service's registered routes to the set
it currently exposes.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.errors import ConflictError, ReconcileError, StoreError, ValidationError
from rbac_registry.kernel.models import generate_uuid
from rbac_registry.kernel.registry.service_locks import ServiceLocks
from rbac_registry.kernel.store import RouteEntry, RouteStore
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)


class ReconcileOutcome(str, Enum):
    """How far a reconciliation got."""
    RECONCILED = "reconciled"
    STALE_NOT_CLEARED = "stale_not_cleared"
    FAILED = "failed"


@dataclass
class ReconcileResult:
    """
    Result of one reconcile call.

    ``routes`` are the submitted routes as stored (stored IDs win), in
    submission order. ``sweep_error`` is set when deactivating the service's
    previous routes failed; the submission was still activated.
    """
    service: str
    outcome: ReconcileOutcome
    routes: List[RouteEntry] = field(default_factory=list)
    deactivated: Optional[int] = None
    sweep_error: Optional[str] = None
    error: Optional[str] = None


def normalize_submission(service: str, submitted: Iterable[RouteEntry]) -> List[RouteEntry]:
    """
    Validate a submission and pin it to ``service``.

    The payload's own service field is ignored so a caller can only register
    routes under the name it reconciles. Methods are upper-cased and repeated
    natural keys collapse to their first occurrence.
    """
    if not service or not service.strip():
        raise ValidationError("service is required")
    service = service.strip()

    routes: List[RouteEntry] = []
    seen = set()
    for index, route in enumerate(submitted):
        method = (route.method or "").strip().upper()
        path = (route.path or "").strip()
        if not method or not path:
            raise ValidationError(f"route {index}: method and path are required")

        pinned = replace(route, method=method, path=path, service=service, active=True)
        if pinned.natural_key in seen:
            continue
        seen.add(pinned.natural_key)
        routes.append(pinned)
    return routes


class RegistryReconciler:
    """
    Applies "this is my complete route set" submissions from a service.

    Sequence per call, under the service's lock:
    1. deactivate every stored route of the service (failure is recorded,
       not raised);
    2. upsert each submitted route as active, one statement per route.

    The upserts are not one transaction. If one fails, the ones before it
    stay applied and ReconcileError carries the partial result.
    """

    def __init__(self, session: AsyncSession, locks: ServiceLocks):
        self.routes = RouteStore(session)
        self.locks = locks

    async def reconcile(
        self,
        service: str,
        submitted: Iterable[RouteEntry],
    ) -> ReconcileResult:
        routes = normalize_submission(service, submitted)
        service = service.strip()

        async with self.locks.hold(service):
            result = ReconcileResult(service=service, outcome=ReconcileOutcome.RECONCILED)

            try:
                result.deactivated = await self.routes.set_inactive(service)
            except StoreError as exc:
                # Activation of the new set still proceeds
                logger.warning(
                    "Deactivating routes of %s failed: %s",
                    service,
                    exc.message,
                    extra={"service": service},
                )
                result.outcome = ReconcileOutcome.STALE_NOT_CLEARED
                result.sweep_error = exc.message

            for route in routes:
                if route.id is None:
                    route = replace(route, id=generate_uuid())
                try:
                    stored = await self.routes.add(route)
                except (StoreError, ConflictError) as exc:
                    result.outcome = ReconcileOutcome.FAILED
                    result.error = exc.message
                    logger.error(
                        "Reconciliation of %s stopped at %s %s after %d of %d routes",
                        service,
                        route.method,
                        route.path,
                        len(result.routes),
                        len(routes),
                    )
                    raise ReconcileError(exc.message, result=result) from exc
                result.routes.append(stored)

        logger.info(
            "Reconciled %s: %d active, %s deactivated, outcome=%s",
            service,
            len(result.routes),
            result.deactivated if result.deactivated is not None else "?",
            result.outcome.value,
            extra={"service": service},
        )
        return result
