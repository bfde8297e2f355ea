"""
Unit of work over a single AsyncSession.

The orchestrators open one of these per transaction and hand it to
repositories and, on the delete path, to the deployment engine, so every
write made through it shares one commit/rollback boundary.
"""

from types import TracebackType

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = structlog.get_logger(__name__)


class UnitOfWork:
    """Transactional scope: everything written through ``session`` commits or rolls back together."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._committed = False

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work is not active; use 'async with'")
        return self._session

    @property
    def committed(self) -> bool:
        return self._committed

    async def begin(self) -> "UnitOfWork":
        """Open the session. The transaction itself starts on first use."""
        if self._session is None:
            self._session = self._session_factory()
            self._committed = False
        return self

    async def commit(self) -> None:
        await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Roll back pending writes; a no-op once the unit of work has committed."""
        if self._session is None or self._committed:
            return
        await self._session.rollback()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "UnitOfWork":
        return await self.begin()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is not None or not self._committed:
                if exc_type is not None:
                    logger.debug("Rolling back unit of work", error=str(exc))
                await self.rollback()
        finally:
            await self.close()


__all__ = ["UnitOfWork"]
