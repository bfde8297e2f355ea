"""Tests for lazy environment creation."""

import pytest

from chartstore.appstore.deployment.environment import EnvironmentResolver
from chartstore.cluster.models import Environment
from chartstore.exceptions import EntityNotFoundError
from chartstore.unit_of_work import UnitOfWork
from tests.conftest import fetch_all

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_returns_existing_environment(session_factory, seed) -> None:
    async with UnitOfWork(session_factory) as uow:
        environment_id = await EnvironmentResolver().ensure_environment(
            uow, seed.cluster_id, seed.namespace, user_id=1
        )

    assert environment_id == seed.environment_id
    assert len(await fetch_all(session_factory, Environment)) == 1


@pytest.mark.asyncio
async def test_creates_missing_environment(session_factory, seed) -> None:
    async with UnitOfWork(session_factory) as uow:
        environment_id = await EnvironmentResolver().ensure_environment(
            uow, seed.cluster_id, "monitoring", user_id=1
        )
        await uow.commit()

    rows = await fetch_all(session_factory, Environment, Environment.id == environment_id)
    assert rows[0].name == "default_cluster--monitoring"
    assert rows[0].namespace == "monitoring"
    assert rows[0].cluster_id == seed.cluster_id
    assert rows[0].default is False


@pytest.mark.asyncio
async def test_empty_namespace_uses_default_identifier(session_factory, seed) -> None:
    async with UnitOfWork(session_factory) as uow:
        environment_id = await EnvironmentResolver().ensure_environment(
            uow, seed.cluster_id, "", user_id=1
        )
        await uow.commit()

    rows = await fetch_all(session_factory, Environment, Environment.id == environment_id)
    assert rows[0].name == "default_cluster__default"


@pytest.mark.asyncio
async def test_creation_is_rolled_back_with_the_caller(session_factory, seed) -> None:
    async with UnitOfWork(session_factory) as uow:
        await EnvironmentResolver().ensure_environment(uow, seed.cluster_id, "monitoring", None)

    assert len(await fetch_all(session_factory, Environment)) == 1


@pytest.mark.asyncio
async def test_unknown_cluster_raises(session_factory, seed) -> None:
    async with UnitOfWork(session_factory) as uow:
        with pytest.raises(EntityNotFoundError) as exc_info:
            await EnvironmentResolver().ensure_environment(uow, 9999, "monitoring", None)

    assert exc_info.value.entity == "Cluster"
