"""
RBAC route registry.

Keeps a persistent registry of which routes each service exposes, which
roles exist and which roles may call which routes.
"""

__version__ = "1.0.0"
