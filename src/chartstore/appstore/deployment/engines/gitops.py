"""
GitOps deployment engine.

Registers installed apps as GitOps applications and records the deployed
values in the chart history.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ....unit_of_work import UnitOfWork
from ...history import AppStoreChartsHistoryService
from ...models import AppstoreDeploymentStatus, InstalledApp
from ...repository import InstalledAppRepository
from ...schemas import InstallAppVersionRequest, InstalledAppDetail
from .base import DeploymentEngine, EngineKind
from .client import DeploymentEngineClient

logger = structlog.get_logger(__name__)


def build_gitops_app_name(app_name: str, environment_name: str) -> str:
    return f"{app_name}-{environment_name}"


class GitOpsDeploymentEngine(DeploymentEngine):
    """Hands deployments to the GitOps controller."""

    kind = EngineKind.GITOPS

    APPLICATIONS_PATH = "/api/v1/applications"

    def __init__(
        self,
        client: DeploymentEngineClient,
        session_factory: async_sessionmaker[AsyncSession],
        history_service: AppStoreChartsHistoryService | None = None,
        installed_app_repository: InstalledAppRepository | None = None,
    ) -> None:
        self.client = client
        self.session_factory = session_factory
        self.history_service = history_service or AppStoreChartsHistoryService()
        self.installed_app_repository = installed_app_repository or InstalledAppRepository()

    async def install_app(self, request: InstallAppVersionRequest) -> None:
        gitops_name = build_gitops_app_name(request.app_name, request.environment_name or "")
        logger.info(
            "Registering GitOps application",
            gitops_app_name=gitops_name,
            installed_app_id=request.installed_app_id,
        )
        await self.client.request(
            "POST",
            self.APPLICATIONS_PATH,
            data={
                "name": gitops_name,
                "cluster_id": request.cluster_id,
                "namespace": request.namespace,
                "app_store_application_version_id": request.app_store_version,
                "values_yaml": request.values_override_yaml,
            },
        )

        if request.installed_app_version_id is None:
            return
        async with UnitOfWork(self.session_factory) as uow:
            await self.history_service.create_app_store_charts_history(
                uow,
                request.installed_app_version_id,
                request.values_override_yaml,
                request.user_id,
            )
            await uow.commit()

    async def delete_installed_app(
        self,
        app_name: str,
        environment_name: str,
        request: InstallAppVersionRequest,
        installed_app: InstalledApp,
        uow: UnitOfWork,
    ) -> None:
        gitops_name = build_gitops_app_name(app_name, environment_name)
        logger.info(
            "Deregistering GitOps application",
            gitops_app_name=gitops_name,
            installed_app_id=installed_app.id,
        )
        await self.client.request("DELETE", f"{self.APPLICATIONS_PATH}/{gitops_name}")

        # Recorded in the caller's transaction so it rolls back with the soft-deletes.
        installed_app.status = AppstoreDeploymentStatus.DEPLOY_DELETED.value
        await self.installed_app_repository.update_installed_app(uow.session, installed_app)

        version = await self.installed_app_repository.get_latest_installed_app_version(
            uow.session, installed_app.id
        )
        if version is not None:
            await self.history_service.create_app_store_charts_history(
                uow, version.id, version.values_yaml, request.user_id
            )

    async def get_app_status(self, record: InstalledAppDetail, token: str | None = None) -> str:
        gitops_name = build_gitops_app_name(record.app_name, record.environment_name)
        response = await self.client.request(
            "GET",
            f"{self.APPLICATIONS_PATH}/{gitops_name}/resource-tree",
            token=token,
            resource_tree=True,
        )
        return response.get("status", "Unknown")
