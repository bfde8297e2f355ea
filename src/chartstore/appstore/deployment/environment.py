"""
Lazy environment creation for EA_ONLY installs, where no environment
registry is populated ahead of time.
"""

import structlog

from ...cluster.repository import EnvironmentRepository
from ...cluster.schemas import EnvironmentBean
from ...cluster.service import ClusterService, EnvironmentService, build_environment_identifier
from ...exceptions import EntityNotFoundError
from ...unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class EnvironmentResolver:
    def __init__(
        self,
        environment_repository: EnvironmentRepository | None = None,
        cluster_service: ClusterService | None = None,
        environment_service: EnvironmentService | None = None,
    ) -> None:
        self.environment_repository = environment_repository or EnvironmentRepository()
        self.cluster_service = cluster_service or ClusterService()
        self.environment_service = environment_service or EnvironmentService(
            self.environment_repository
        )

    async def ensure_environment(
        self,
        uow: UnitOfWork,
        cluster_id: int,
        namespace: str,
        user_id: int | None,
    ) -> int:
        """Return the id of the environment for (cluster, namespace), creating it if missing."""
        session = uow.session
        try:
            environment = await self.environment_repository.find_one_by_namespace_and_cluster_id(
                session, namespace, cluster_id
            )
            return environment.id
        except EntityNotFoundError:
            pass

        cluster = await self.cluster_service.find_by_id(session, cluster_id)
        bean = EnvironmentBean(
            environment=build_environment_identifier(cluster.cluster_name, namespace),
            cluster_id=cluster_id,
            namespace=namespace,
            default=False,
            active=True,
        )
        created = await self.environment_service.create(session, bean, user_id)
        logger.info(
            "Environment created for install target",
            environment_id=created.id,
            cluster_id=cluster_id,
            namespace=namespace,
        )
        return created.id
