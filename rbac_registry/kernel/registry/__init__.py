"""
Registry Reconciler - keeps each service's registered routes in step with
what it serves.
"""

from rbac_registry.kernel.registry.live_endpoints import LiveEndpoint, collect_live_endpoints
from rbac_registry.kernel.registry.reconciler import (
    ReconcileOutcome,
    ReconcileResult,
    RegistryReconciler,
    normalize_submission,
)
from rbac_registry.kernel.registry.service_locks import ServiceLocks, get_service_locks

__all__ = [
    "LiveEndpoint",
    "collect_live_endpoints",
    "ReconcileOutcome",
    "ReconcileResult",
    "RegistryReconciler",
    "normalize_submission",
    "ServiceLocks",
    "get_service_locks",
]
