"""
Global pytest configuration and fixtures for chartstore tests.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# Keep a developer's DATABASE__URL from leaking into the test run
os.environ.pop("DATABASE__URL", None)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("OBSERVABILITY__LOG_FORMAT", "text")

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from chartstore.appstore.deployment.engines.base import DeploymentEngine, EngineKind  # noqa: E402
from chartstore.appstore.deployment.selector import DeploymentEngineSelector  # noqa: E402
from chartstore.appstore.deployment.service import AppStoreDeploymentService  # noqa: E402
from chartstore.appstore.models import (  # noqa: E402
    AppStore,
    AppStoreApplicationVersion,
    AppstoreDeploymentStatus,
    ChartRepo,
)
from chartstore.cluster.models import Cluster, Environment  # noqa: E402
from chartstore.db import create_all_tables_async  # noqa: E402
from chartstore.settings import ServerMode  # noqa: E402


# ==========================================
# Database
# ==========================================


@pytest_asyncio.fixture
async def async_db_engine(tmp_path) -> AsyncEngine:
    """File-backed SQLite engine so separate sessions see each other's commits."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chartstore.sqlite'}")
    await create_all_tables_async(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(async_db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=async_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def async_db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@dataclass
class SeedData:
    cluster_id: int
    cluster_name: str
    environment_id: int
    environment_name: str
    namespace: str
    chart_repo_id: int
    app_store_id: int
    app_store_version_id: int


@pytest_asyncio.fixture
async def seed(session_factory) -> SeedData:
    """One cluster with a 'prod' environment and one published chart version."""
    async with session_factory() as session:
        cluster = Cluster(cluster_name="default_cluster", server_url="https://k8s.example.com")
        session.add(cluster)
        await session.flush()

        environment = Environment(
            name="prod",
            cluster_id=cluster.id,
            namespace="prod-ns",
            default=True,
        )
        chart_repo = ChartRepo(name="bitnami", url="https://charts.bitnami.com/bitnami")
        session.add_all([environment, chart_repo])
        await session.flush()

        app_store = AppStore(name="redis", chart_repo_id=chart_repo.id)
        session.add(app_store)
        await session.flush()

        version = AppStoreApplicationVersion(
            app_store_id=app_store.id,
            name="redis",
            version="17.3.0",
            values_yaml="replicas: 1\n",
        )
        session.add(version)
        await session.commit()

        return SeedData(
            cluster_id=cluster.id,
            cluster_name=cluster.cluster_name,
            environment_id=environment.id,
            environment_name=environment.name,
            namespace=environment.namespace,
            chart_repo_id=chart_repo.id,
            app_store_id=app_store.id,
            app_store_version_id=version.id,
        )


async def fetch_all(session_factory, model, *criteria) -> list[Any]:
    """Read committed rows in a fresh session."""
    async with session_factory() as session:
        result = await session.execute(select(model).where(*criteria).order_by(model.id))
        return list(result.unique().scalars().all())


# ==========================================
# Deployment engines
# ==========================================


@dataclass
class FakeDeploymentEngine(DeploymentEngine):
    """Records calls; failures and statuses are scripted per test."""

    kind: EngineKind
    install_error: BaseException | None = None
    delete_error: BaseException | None = None
    statuses: dict[str, Any] = field(default_factory=dict)
    installed: list[Any] = field(default_factory=list)
    deleted: list[tuple[str, str]] = field(default_factory=list)

    async def install_app(self, request) -> None:
        self.installed.append(request)
        if self.install_error is not None:
            raise self.install_error

    async def delete_installed_app(self, app_name, environment_name, request, installed_app, uow):
        self.deleted.append((app_name, environment_name))
        # Write through the caller's unit of work, as the GitOps engine does
        installed_app.status = AppstoreDeploymentStatus.DEPLOY_DELETED.value
        uow.session.add(installed_app)
        await uow.session.flush()
        if self.delete_error is not None:
            raise self.delete_error

    async def get_app_status(self, record, token=None) -> str:
        status = self.statuses.get(record.app_name, "Healthy")
        if isinstance(status, BaseException):
            raise status
        return status


@pytest.fixture
def helm_engine() -> FakeDeploymentEngine:
    return FakeDeploymentEngine(kind=EngineKind.HELM)


@pytest.fixture
def gitops_engine() -> FakeDeploymentEngine:
    return FakeDeploymentEngine(kind=EngineKind.GITOPS)


@pytest.fixture
def make_service(session_factory, helm_engine, gitops_engine):
    """Build a deployment service for a server mode, sharing the fake engines."""

    def _make(server_mode: ServerMode = ServerMode.FULL) -> AppStoreDeploymentService:
        selector = DeploymentEngineSelector(server_mode, helm_engine, gitops_engine)
        return AppStoreDeploymentService(
            session_factory=session_factory,
            engine_selector=selector,
            server_mode=server_mode,
        )

    return _make
