"""
Direct-apply deployment engine.

Installs charts as helm releases through the helm gateway API. Used in
EA_ONLY mode and for records created under it.
"""

import structlog

from ....exceptions import ConfigurationError
from ....unit_of_work import UnitOfWork
from ...models import InstalledApp
from ...schemas import InstallAppVersionRequest, InstalledAppDetail
from .base import DeploymentEngine, EngineKind
from .client import DeploymentEngineClient

logger = structlog.get_logger(__name__)


class HelmDeploymentEngine(DeploymentEngine):
    """Applies charts directly to the target cluster as helm releases."""

    kind = EngineKind.HELM

    RELEASES_PATH = "/api/v1/releases"

    def __init__(self, client: DeploymentEngineClient) -> None:
        self.client = client

    def _release_path(self, cluster_id: int, namespace: str, release_name: str) -> str:
        return f"{self.RELEASES_PATH}/{cluster_id}/{namespace}/{release_name}"

    async def install_app(self, request: InstallAppVersionRequest) -> None:
        if request.cluster_id is None or request.namespace is None:
            raise ConfigurationError("Install request has no target cluster/namespace")

        logger.info(
            "Installing helm release",
            release_name=request.app_name,
            cluster_id=request.cluster_id,
            namespace=request.namespace,
        )
        await self.client.request(
            "POST",
            self.RELEASES_PATH,
            data={
                "release_name": request.app_name,
                "cluster_id": request.cluster_id,
                "namespace": request.namespace,
                "app_store_application_version_id": request.app_store_version,
                "values_yaml": request.values_override_yaml,
            },
        )

    async def delete_installed_app(
        self,
        app_name: str,
        environment_name: str,
        request: InstallAppVersionRequest,
        installed_app: InstalledApp,
        uow: UnitOfWork,
    ) -> None:
        environment = installed_app.environment
        logger.info(
            "Deleting helm release",
            release_name=app_name,
            environment=environment_name,
            installed_app_id=installed_app.id,
        )
        await self.client.request(
            "DELETE",
            self._release_path(environment.cluster_id, environment.namespace, app_name),
        )

    async def get_app_status(self, record: InstalledAppDetail, token: str | None = None) -> str:
        response = await self.client.request(
            "GET",
            self._release_path(record.cluster_id, record.namespace, record.app_name)
            + "/resource-tree",
            token=token,
            resource_tree=True,
        )
        return response.get("status", "Unknown")
