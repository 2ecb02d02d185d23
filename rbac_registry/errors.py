"""
Typed errors raised by the registry core.

Each error carries a stable ``code`` and the HTTP status the API layer
renders it with. The store raises StoreError for any storage fault; the
resolver and reconciler raise the rest.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rbac_registry.kernel.registry.reconciler import ReconcileResult


class RegistryError(Exception):
    """Base class for all registry errors."""

    code = "REGISTRY_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(RegistryError):
    """Missing or malformed identifier or payload field."""

    code = "VALIDATION_ERROR"
    http_status = 400


class NotFoundError(RegistryError):
    """A referenced role or route does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class ConflictError(RegistryError):
    """Unique constraint on role name or route natural key violated."""

    code = "CONFLICT"
    http_status = 409


class StoreError(RegistryError):
    """Underlying storage fault, including connectivity."""

    code = "STORE_ERROR"
    http_status = 500


class ReconcileError(StoreError):
    """An upsert failed mid-reconciliation; ``result`` holds what was applied."""

    code = "RECONCILE_FAILED"

    def __init__(self, message: str, result: Optional["ReconcileResult"] = None):
        super().__init__(message)
        self.result = result
