"""
App repository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import EntityNotFoundError
from .models import App


class AppRepository:
    async def find_by_id(self, session: AsyncSession, app_id: int) -> App:
        result = await session.execute(select(App).where(App.id == app_id))
        app = result.scalar_one_or_none()
        if app is None:
            raise EntityNotFoundError("App", id=app_id)
        return app

    async def find_active_by_name(self, session: AsyncSession, app_name: str) -> App | None:
        stmt = (
            select(App)
            .where(App.app_name == app_name, App.active.is_(True))
            .order_by(App.id)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_active_list_by_name(self, session: AsyncSession, app_name: str) -> list[App]:
        """Active rows with this name, earliest first."""
        stmt = (
            select(App)
            .where(App.app_name == app_name, App.active.is_(True))
            .order_by(App.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, session: AsyncSession, app: App) -> App:
        session.add(app)
        await session.flush()
        return app

    async def update(self, session: AsyncSession, app: App) -> App:
        session.add(app)
        await session.flush()
        return app
