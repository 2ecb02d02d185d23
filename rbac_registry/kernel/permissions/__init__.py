"""
Authorization Resolver - role/route grants and the joins over them.
"""

from rbac_registry.kernel.permissions.authorization_resolver import AuthorizationResolver

__all__ = ["AuthorizationResolver"]
