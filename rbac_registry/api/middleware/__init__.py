from rbac_registry.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
