"""
App store deployment service.

Orchestrates install, status update and delete of app store charts:

- install: bookkeeping rows are written and committed in one unit of work,
  the selected engine deploys outside it, and the status moves to
  DEPLOY_SUCCESS in a second, independent unit of work. An engine failure
  leaves the installed app at DEPLOY_INIT for an operator or a status poller
  to reconcile.
- delete: soft-deletes and the engine call share one unit of work, so a
  failing engine leaves every row active.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...apps.repository import AppRepository
from ...cluster.repository import EnvironmentRepository
from ...exceptions import EntityNotFoundError, ResourceTreeNotFoundError
from ...logging import operation_context
from ...settings import ServerMode, Settings, get_settings
from ...unit_of_work import UnitOfWork
from ..history import AppStoreChartsHistoryService
from ..models import (
    AppstoreDeploymentStatus,
    ClusterInstalledApps,
    InstalledApp,
    InstalledAppVersion,
)
from ..repository import (
    AppStoreApplicationVersionRepository,
    ClusterInstalledAppsRepository,
    InstalledAppRepository,
)
from ..schemas import InstallAppVersionRequest, InstalledAppsResponse
from .engines.client import DeploymentEngineClient
from .engines.gitops import GitOpsDeploymentEngine
from .engines.helm import HelmDeploymentEngine
from .environment import EnvironmentResolver
from .registrar import AppRegistrar
from .selector import DeploymentEngineSelector

logger = structlog.get_logger(__name__)

RESOURCE_TREE_NOT_FOUND_STATUS = "Not Found"


class AppStoreDeploymentService:
    """Install/delete orchestration for app store charts."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine_selector: DeploymentEngineSelector,
        server_mode: ServerMode,
        installed_app_repository: InstalledAppRepository | None = None,
        app_store_version_repository: AppStoreApplicationVersionRepository | None = None,
        environment_repository: EnvironmentRepository | None = None,
        cluster_installed_apps_repository: ClusterInstalledAppsRepository | None = None,
        app_repository: AppRepository | None = None,
        app_registrar: AppRegistrar | None = None,
        environment_resolver: EnvironmentResolver | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.engine_selector = engine_selector
        self.server_mode = server_mode
        self.installed_app_repository = installed_app_repository or InstalledAppRepository()
        self.app_store_version_repository = (
            app_store_version_repository or AppStoreApplicationVersionRepository()
        )
        self.environment_repository = environment_repository or EnvironmentRepository()
        self.cluster_installed_apps_repository = (
            cluster_installed_apps_repository or ClusterInstalledAppsRepository()
        )
        self.app_repository = app_repository or AppRepository()
        self.app_registrar = app_registrar or AppRegistrar(server_mode, self.app_repository)
        self.environment_resolver = environment_resolver or EnvironmentResolver(
            self.environment_repository
        )

    def _unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self.session_factory)

    # ==================== Install ====================

    async def app_store_deploy_operation_db(
        self, request: InstallAppVersionRequest, uow: UnitOfWork
    ) -> InstallAppVersionRequest:
        """Write the bookkeeping rows of an install into ``uow``. Does not commit."""
        session = uow.session

        if request.app_store_version is None:
            raise EntityNotFoundError("AppStoreApplicationVersion", id=None)
        app_store_version = await self.app_store_version_repository.find_by_id(
            session, request.app_store_version
        )

        # EA_ONLY has no environment registry; create the target environment on demand
        if self.server_mode == ServerMode.EA_ONLY:
            request.environment_id = await self.environment_resolver.ensure_environment(
                uow, request.cluster_id, request.namespace or "", request.user_id
            )

        if request.environment_id is None:
            raise EntityNotFoundError("Environment", id=None)
        environment = await self.environment_repository.find_by_id(
            session, request.environment_id
        )

        app = await self.app_registrar.ensure_app(
            uow, request.app_name, request.team_id, request.user_id
        )
        request.app_id = app.id
        request.app_offering_mode = app.app_offering_mode

        installed_app = InstalledApp(
            app_id=app.id,
            environment_id=environment.id,
            status=AppstoreDeploymentStatus.DEPLOY_INIT.value,
            active=True,
            created_by=request.user_id,
            updated_by=request.user_id,
        )
        try:
            await self.installed_app_repository.create_installed_app(session, installed_app)
        except Exception as e:
            logger.error("Error while creating installed app", app_id=app.id, error=str(e))
            raise
        request.installed_app_id = installed_app.id

        installed_app_version = InstalledAppVersion(
            installed_app_id=installed_app.id,
            app_store_application_version_id=app_store_version.id,
            values_yaml=request.values_override_yaml,
            reference_value_id=request.reference_value_id,
            reference_value_kind=request.reference_value_kind,
            active=True,
            created_by=request.user_id,
            updated_by=request.user_id,
        )
        try:
            await self.installed_app_repository.create_installed_app_version(
                session, installed_app_version
            )
        except Exception as e:
            logger.error(
                "Error while creating installed app version",
                installed_app_id=installed_app.id,
                error=str(e),
            )
            raise
        request.installed_app_version_id = installed_app_version.id

        if request.default_cluster_component:
            cluster_installed_app = ClusterInstalledApps(
                cluster_id=environment.cluster_id,
                installed_app_id=installed_app.id,
                created_by=request.user_id,
                updated_by=request.user_id,
            )
            try:
                await self.cluster_installed_apps_repository.save(session, cluster_installed_app)
            except Exception as e:
                logger.error(
                    "Error while creating cluster installed app",
                    cluster_id=environment.cluster_id,
                    error=str(e),
                )
                raise

        request.environment_id = environment.id
        request.environment_name = environment.name
        request.cluster_id = environment.cluster_id
        request.namespace = environment.namespace
        return request

    async def app_store_deploy_operation_status_update(
        self, installed_app_id: int, status: AppstoreDeploymentStatus
    ) -> bool:
        """Move an installed app to ``status`` in its own unit of work."""
        async with self._unit_of_work() as uow:
            try:
                installed_app = await self.installed_app_repository.get_installed_app(
                    uow.session, installed_app_id
                )
                installed_app.status = AppstoreDeploymentStatus(status).value
                await self.installed_app_repository.update_installed_app(uow.session, installed_app)
                await uow.commit()
            except Exception as e:
                logger.error(
                    "Error while updating installed app status",
                    installed_app_id=installed_app_id,
                    status=str(status),
                    error=str(e),
                )
                raise
        return True

    async def install_app(self, request: InstallAppVersionRequest) -> InstallAppVersionRequest:
        """
        Install a chart.

        The bookkeeping commit happens before the engine call. If the engine
        fails or the task is cancelled, the rows stay committed at DEPLOY_INIT
        and the error reaches the caller.
        """
        with operation_context("install_app", app_name=request.app_name):
            return await self._install_app(request.model_copy())

    async def _install_app(self, request: InstallAppVersionRequest) -> InstallAppVersionRequest:
        async with self._unit_of_work() as uow:
            try:
                request = await self.app_store_deploy_operation_db(request, uow)
            except Exception as e:
                logger.error("Install bookkeeping failed", app_name=request.app_name, error=str(e))
                raise
            await uow.commit()

        logger.info(
            "Install bookkeeping committed",
            app_name=request.app_name,
            installed_app_id=request.installed_app_id,
            environment_id=request.environment_id,
        )

        selection = self.engine_selector.select(request.app_offering_mode)
        try:
            await selection.engine.install_app(request)
        except Exception as e:
            logger.error(
                "Deployment engine install failed",
                engine=selection.kind.value,
                installed_app_id=request.installed_app_id,
                status=AppstoreDeploymentStatus.DEPLOY_INIT.value,
                error=str(e),
            )
            raise

        await self.app_store_deploy_operation_status_update(
            request.installed_app_id, AppstoreDeploymentStatus.DEPLOY_SUCCESS
        )
        logger.info(
            "App installed",
            app_name=request.app_name,
            installed_app_id=request.installed_app_id,
            engine=selection.kind.value,
        )
        return request

    # ==================== Delete ====================

    async def delete_installed_app(
        self, request: InstallAppVersionRequest
    ) -> InstallAppVersionRequest:
        """
        Soft-delete an installed app and remove its deployment.

        All-or-nothing: the engine call runs inside the same unit of work as
        the soft-deletes, and any failure rolls every row back to active.
        """
        with operation_context(
            "delete_installed_app",
            app_name=request.app_name,
            installed_app_id=request.installed_app_id,
        ):
            return await self._delete_installed_app(request.model_copy())

    async def _delete_installed_app(
        self, request: InstallAppVersionRequest
    ) -> InstallAppVersionRequest:
        async with self._unit_of_work() as uow:
            session = uow.session
            if request.environment_id is None:
                raise EntityNotFoundError("Environment", id=None)
            try:
                environment = await self.environment_repository.find_by_id(
                    session, request.environment_id
                )
            except EntityNotFoundError:
                logger.error(
                    "Environment not found for delete", environment_id=request.environment_id
                )
                raise

            app = await self.app_repository.find_by_id(session, request.app_id)
            app.active = False
            app.updated_by = request.user_id
            await self.app_repository.update(session, app)

            try:
                installed_app = await self.installed_app_repository.get_installed_app(
                    session, request.installed_app_id
                )
            except Exception as e:
                logger.error(
                    "Error fetching installed app",
                    installed_app_id=request.installed_app_id,
                    error=str(e),
                )
                raise
            installed_app.active = False
            installed_app.updated_by = request.user_id
            await self.installed_app_repository.update_installed_app(session, installed_app)

            repository = self.installed_app_repository
            versions = await repository.get_installed_app_version_by_installed_app_id(
                session, request.installed_app_id
            )
            for version in versions:
                version.active = False
                version.updated_by = request.user_id
                await self.installed_app_repository.update_installed_app_version(session, version)

            selection = self.engine_selector.select(app.app_offering_mode)
            try:
                await selection.engine.delete_installed_app(
                    app.app_name, environment.name, request, installed_app, uow
                )
            except Exception as e:
                logger.error(
                    "Deployment engine delete failed, rolling back",
                    engine=selection.kind.value,
                    installed_app_id=request.installed_app_id,
                    error=str(e),
                )
                raise

            try:
                await uow.commit()
            except Exception as e:
                logger.error("Error committing delete", error=str(e))
                raise

        logger.info(
            "Installed app deleted",
            app_name=app.app_name,
            installed_app_id=request.installed_app_id,
            engine=selection.kind.value,
        )
        return request

    # ==================== Queries ====================

    async def get_installed_app(self, installed_app_id: int) -> InstallAppVersionRequest:
        async with self._unit_of_work() as uow:
            try:
                installed_app = await self.installed_app_repository.get_installed_app(
                    uow.session, installed_app_id
                )
            except Exception as e:
                logger.error(
                    "Error fetching installed app", installed_app_id=installed_app_id, error=str(e)
                )
                raise
            return InstallAppVersionRequest(
                id=installed_app.id,
                installed_app_id=installed_app.id,
                app_id=installed_app.app_id,
                app_name=installed_app.app.app_name,
                app_offering_mode=installed_app.app.app_offering_mode,
                environment_id=installed_app.environment_id,
                environment_name=installed_app.environment.name,
                cluster_id=installed_app.environment.cluster_id,
                namespace=installed_app.environment.namespace,
            )

    async def get_all_installed_apps_by_app_store_id(
        self, app_store_id: int, token: str | None = None
    ) -> list[InstalledAppsResponse]:
        """List installations of an app store chart with their live engine status."""
        async with self._unit_of_work() as uow:
            records = await self.installed_app_repository.get_all_installed_apps_by_app_store_id(
                uow.session, app_store_id
            )

        responses: list[InstalledAppsResponse] = []
        for record in records:
            selection = self.engine_selector.select(record.app_offering_mode)
            try:
                status = await selection.engine.get_app_status(record, token)
            except ResourceTreeNotFoundError:
                status = RESOURCE_TREE_NOT_FOUND_STATUS
            except Exception as e:
                logger.error(
                    "Error fetching app status",
                    installed_app_id=record.installed_app_id,
                    engine=selection.kind.value,
                    error=str(e),
                )
                raise

            response = InstalledAppsResponse(
                environment_name=record.environment_name,
                app_name=record.app_name,
                deployed_at=record.updated_at,
                deployed_by=record.updated_by,
                status=status,
                app_store_application_version_id=record.app_store_application_version_id,
                installed_app_version_id=record.installed_app_version_id,
                installed_apps_id=record.installed_app_id,
                environment_id=record.environment_id,
                app_offering_mode=record.app_offering_mode,
            )
            if record.app_offering_mode == ServerMode.EA_ONLY.value:
                response.cluster_id = record.cluster_id
                response.namespace = record.namespace
            responses.append(response)
        return responses

    async def is_chart_repo_active(self, app_store_version_id: int) -> bool:
        async with self._unit_of_work() as uow:
            version = await self.app_store_version_repository.find_by_id(
                uow.session, app_store_version_id
            )
            return version.app_store.chart_repo.active


def create_app_store_deployment_service(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings | None = None,
) -> AppStoreDeploymentService:
    """Wire the service, both engines and the selector from settings."""
    settings = settings or get_settings()
    engine_settings = settings.deployment

    helm_engine = HelmDeploymentEngine(
        DeploymentEngineClient(
            base_url=engine_settings.helm_url,
            token=engine_settings.token,
            verify_ssl=engine_settings.verify_ssl,
            timeout=engine_settings.timeout,
        )
    )
    gitops_engine = GitOpsDeploymentEngine(
        DeploymentEngineClient(
            base_url=engine_settings.gitops_url,
            token=engine_settings.token,
            verify_ssl=engine_settings.verify_ssl,
            timeout=engine_settings.timeout,
        ),
        session_factory=session_factory,
        history_service=AppStoreChartsHistoryService(),
    )
    selector = DeploymentEngineSelector(settings.server_mode, helm_engine, gitops_engine)
    return AppStoreDeploymentService(
        session_factory=session_factory,
        engine_selector=selector,
        server_mode=settings.server_mode,
    )
