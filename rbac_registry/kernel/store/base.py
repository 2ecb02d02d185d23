"""
Shared statement guard for the entity stores.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.errors import ConflictError, StoreError
from rbac_registry.logging_config import get_logger

logger = get_logger(__name__)


class BaseStore:
    """
    Base for the route, role and rbac stores.

    Every store method is one statement and commits on its own, so a later
    failure on the same session never rolls back earlier statements.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _statement(
        self,
        name: str,
        failure: str,
        *,
        conflict: Optional[str] = None,
    ) -> AsyncIterator[None]:
        """
        Run one statement, translating storage faults.

        Args:
            name: Statement name for the log line
            failure: Message of the StoreError raised on failure
            conflict: When set, unique violations raise ConflictError with
                this message instead of StoreError
        """
        try:
            yield
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if conflict is not None:
                logger.info("Unique violation on %s: %s", name, exc.orig)
                raise ConflictError(conflict) from exc
            logger.error("Integrity error executing %s: %s", name, exc)
            raise StoreError(failure) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Failed to execute %s: %s", name, exc)
            raise StoreError(failure) from exc
