"""
App store repositories.

Stateless: every method takes the session of the caller's unit of work.
Single-row lookups raise EntityNotFoundError; soft-deleted rows are filtered out.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..apps.models import App
from ..cluster.models import Environment
from ..exceptions import EntityNotFoundError
from .models import (
    AppStoreApplicationVersion,
    AppStoreChartsHistory,
    ClusterInstalledApps,
    InstalledApp,
    InstalledAppVersion,
)
from .schemas import InstalledAppDetail


class InstalledAppRepository:
    async def create_installed_app(
        self, session: AsyncSession, installed_app: InstalledApp
    ) -> InstalledApp:
        session.add(installed_app)
        await session.flush()
        return installed_app

    async def get_installed_app(self, session: AsyncSession, installed_app_id: int) -> InstalledApp:
        stmt = select(InstalledApp).where(
            InstalledApp.id == installed_app_id, InstalledApp.active.is_(True)
        )
        result = await session.execute(stmt)
        installed_app = result.unique().scalar_one_or_none()
        if installed_app is None:
            raise EntityNotFoundError("InstalledApp", id=installed_app_id)
        return installed_app

    async def update_installed_app(
        self, session: AsyncSession, installed_app: InstalledApp
    ) -> InstalledApp:
        session.add(installed_app)
        await session.flush()
        return installed_app

    async def create_installed_app_version(
        self, session: AsyncSession, version: InstalledAppVersion
    ) -> InstalledAppVersion:
        session.add(version)
        await session.flush()
        return version

    async def get_installed_app_version_by_installed_app_id(
        self, session: AsyncSession, installed_app_id: int
    ) -> list[InstalledAppVersion]:
        stmt = (
            select(InstalledAppVersion)
            .where(
                InstalledAppVersion.installed_app_id == installed_app_id,
                InstalledAppVersion.active.is_(True),
            )
            .order_by(InstalledAppVersion.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_latest_installed_app_version(
        self, session: AsyncSession, installed_app_id: int
    ) -> InstalledAppVersion | None:
        """Most recent version row, active or not."""
        stmt = (
            select(InstalledAppVersion)
            .where(InstalledAppVersion.installed_app_id == installed_app_id)
            .order_by(InstalledAppVersion.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_installed_app_version(
        self, session: AsyncSession, version: InstalledAppVersion
    ) -> InstalledAppVersion:
        session.add(version)
        await session.flush()
        return version

    async def get_all_installed_apps_by_app_store_id(
        self, session: AsyncSession, app_store_id: int
    ) -> list[InstalledAppDetail]:
        stmt = (
            select(
                InstalledApp.id.label("installed_app_id"),
                InstalledAppVersion.id.label("installed_app_version_id"),
                InstalledAppVersion.app_store_application_version_id,
                App.id.label("app_id"),
                App.app_name,
                App.app_offering_mode,
                Environment.id.label("environment_id"),
                Environment.name.label("environment_name"),
                Environment.cluster_id,
                Environment.namespace,
                InstalledAppVersion.updated_at,
                InstalledAppVersion.updated_by,
            )
            .select_from(InstalledAppVersion)
            .join(InstalledApp, InstalledApp.id == InstalledAppVersion.installed_app_id)
            .join(App, App.id == InstalledApp.app_id)
            .join(Environment, Environment.id == InstalledApp.environment_id)
            .join(
                AppStoreApplicationVersion,
                AppStoreApplicationVersion.id
                == InstalledAppVersion.app_store_application_version_id,
            )
            .where(
                AppStoreApplicationVersion.app_store_id == app_store_id,
                InstalledAppVersion.active.is_(True),
                InstalledApp.active.is_(True),
            )
            .order_by(InstalledApp.id)
        )
        result = await session.execute(stmt)
        return [InstalledAppDetail.model_validate(row._mapping) for row in result.all()]


class AppStoreApplicationVersionRepository:
    async def find_by_id(
        self, session: AsyncSession, version_id: int
    ) -> AppStoreApplicationVersion:
        stmt = select(AppStoreApplicationVersion).where(AppStoreApplicationVersion.id == version_id)
        result = await session.execute(stmt)
        version = result.unique().scalar_one_or_none()
        if version is None:
            raise EntityNotFoundError("AppStoreApplicationVersion", id=version_id)
        return version


class ClusterInstalledAppsRepository:
    async def save(
        self, session: AsyncSession, model: ClusterInstalledApps
    ) -> ClusterInstalledApps:
        session.add(model)
        await session.flush()
        return model

    async def find_by_cluster_id(
        self, session: AsyncSession, cluster_id: int
    ) -> list[ClusterInstalledApps]:
        stmt = select(ClusterInstalledApps).where(ClusterInstalledApps.cluster_id == cluster_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())


class AppStoreChartsHistoryRepository:
    async def create_history(
        self, session: AsyncSession, history: AppStoreChartsHistory
    ) -> AppStoreChartsHistory:
        session.add(history)
        await session.flush()
        return history

    async def find_by_installed_app_version_id(
        self, session: AsyncSession, installed_app_version_id: int
    ) -> list[AppStoreChartsHistory]:
        stmt = (
            select(AppStoreChartsHistory)
            .where(AppStoreChartsHistory.installed_app_version_id == installed_app_version_id)
            .order_by(AppStoreChartsHistory.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
