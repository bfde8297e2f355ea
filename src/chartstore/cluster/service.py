"""
Cluster registry: cluster lookup and environment creation.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Environment
from .repository import ClusterRepository, EnvironmentRepository
from .schemas import ClusterBean, EnvironmentBean

logger = structlog.get_logger(__name__)


def build_environment_identifier(cluster_name: str, namespace: str) -> str:
    """Deterministic environment name for a cluster/namespace pair."""
    if not namespace:
        return f"{cluster_name}__default"
    return f"{cluster_name}--{namespace}"


class ClusterService:
    def __init__(self, cluster_repository: ClusterRepository | None = None) -> None:
        self.cluster_repository = cluster_repository or ClusterRepository()

    async def find_by_id(self, session: AsyncSession, cluster_id: int) -> ClusterBean:
        cluster = await self.cluster_repository.find_by_id(session, cluster_id)
        return ClusterBean.model_validate(cluster)


class EnvironmentService:
    def __init__(self, environment_repository: EnvironmentRepository | None = None) -> None:
        self.environment_repository = environment_repository or EnvironmentRepository()

    async def create(
        self, session: AsyncSession, bean: EnvironmentBean, user_id: int | None
    ) -> EnvironmentBean:
        """Create an environment row in the caller's transaction."""
        model = Environment(
            name=bean.environment,
            cluster_id=bean.cluster_id,
            namespace=bean.namespace,
            default=bean.default,
            active=bean.active,
            created_by=user_id,
            updated_by=user_id,
        )
        await self.environment_repository.save(session, model)
        logger.info(
            "Environment created",
            environment_id=model.id,
            environment=model.name,
            cluster_id=model.cluster_id,
        )
        return bean.model_copy(update={"id": model.id})
