"""Tests for the unit of work transaction boundary."""

import pytest

from chartstore.cluster.models import Cluster
from chartstore.unit_of_work import UnitOfWork
from tests.conftest import fetch_all

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_commit_persists_writes(session_factory) -> None:
    async with UnitOfWork(session_factory) as uow:
        uow.session.add(Cluster(cluster_name="c1"))
        await uow.commit()
        assert uow.committed is True

    clusters = await fetch_all(session_factory, Cluster)
    assert [c.cluster_name for c in clusters] == ["c1"]


@pytest.mark.asyncio
async def test_exit_without_commit_rolls_back(session_factory) -> None:
    async with UnitOfWork(session_factory) as uow:
        uow.session.add(Cluster(cluster_name="c1"))
        await uow.session.flush()

    assert await fetch_all(session_factory, Cluster) == []


@pytest.mark.asyncio
async def test_exception_rolls_back_and_propagates(session_factory) -> None:
    with pytest.raises(ValueError):
        async with UnitOfWork(session_factory) as uow:
            uow.session.add(Cluster(cluster_name="c1"))
            await uow.session.flush()
            raise ValueError("boom")

    assert await fetch_all(session_factory, Cluster) == []


@pytest.mark.asyncio
async def test_rollback_after_commit_is_noop(session_factory) -> None:
    async with UnitOfWork(session_factory) as uow:
        uow.session.add(Cluster(cluster_name="c1"))
        await uow.commit()
        await uow.rollback()

    assert len(await fetch_all(session_factory, Cluster)) == 1


@pytest.mark.asyncio
async def test_session_outside_context_raises(session_factory) -> None:
    uow = UnitOfWork(session_factory)
    with pytest.raises(RuntimeError):
        uow.session
