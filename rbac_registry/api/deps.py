"""
FastAPI dependencies for authentication, database sessions and the facade.
"""

import secrets
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.config import get_settings
from rbac_registry.database import async_session_maker
from rbac_registry.kernel.access_facade import AccessFacade
from rbac_registry.kernel.identity.jwt import AccessTokenPayload, verify_access_token
from rbac_registry.kernel.registry import ServiceLocks, get_service_locks


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that yields database sessions.

    The store commits statement by statement; whatever is left open when the
    request fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db)]
Locks = Annotated[ServiceLocks, Depends(get_service_locks)]


def get_facade(db: DbSession, locks: Locks) -> AccessFacade:
    return AccessFacade(db, locks)


Facade = Annotated[AccessFacade, Depends(get_facade)]


async def get_current_principal(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AccessTokenPayload:
    """Verified bearer token or 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


CurrentPrincipal = Annotated[AccessTokenPayload, Depends(get_current_principal)]


async def require_registration_key(
    x_registration_key: Annotated[Optional[str], Header()] = None,
) -> None:
    """
    Guard for route registration endpoints.

    Services register before they hold user tokens, so these endpoints skip
    bearer auth. When ``registration_key`` is configured the caller must
    present it in ``X-Registration-Key``.
    """
    expected = get_settings().registration_key
    if not expected:
        return
    if not x_registration_key or not secrets.compare_digest(x_registration_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid registration key",
        )


RegistrationAllowed = Depends(require_registration_key)

