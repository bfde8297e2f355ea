"""
Cluster and environment repositories.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import EntityNotFoundError
from .models import Cluster, Environment


class ClusterRepository:
    async def find_by_id(self, session: AsyncSession, cluster_id: int) -> Cluster:
        stmt = select(Cluster).where(Cluster.id == cluster_id, Cluster.active.is_(True))
        result = await session.execute(stmt)
        cluster = result.scalar_one_or_none()
        if cluster is None:
            raise EntityNotFoundError("Cluster", id=cluster_id)
        return cluster


class EnvironmentRepository:
    async def find_by_id(self, session: AsyncSession, environment_id: int) -> Environment:
        stmt = select(Environment).where(
            Environment.id == environment_id, Environment.active.is_(True)
        )
        result = await session.execute(stmt)
        environment = result.scalar_one_or_none()
        if environment is None:
            raise EntityNotFoundError("Environment", id=environment_id)
        return environment

    async def find_one_by_namespace_and_cluster_id(
        self, session: AsyncSession, namespace: str, cluster_id: int
    ) -> Environment:
        stmt = select(Environment).where(
            Environment.namespace == namespace,
            Environment.cluster_id == cluster_id,
            Environment.active.is_(True),
        )
        result = await session.execute(stmt)
        environment = result.scalars().first()
        if environment is None:
            raise EntityNotFoundError("Environment", namespace=namespace, cluster_id=cluster_id)
        return environment

    async def save(self, session: AsyncSession, environment: Environment) -> Environment:
        session.add(environment)
        await session.flush()
        return environment
