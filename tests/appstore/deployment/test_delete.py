"""Tests for the all-or-nothing delete flow."""

import pytest

from chartstore.apps.models import App
from chartstore.appstore.models import AppstoreDeploymentStatus, InstalledApp, InstalledAppVersion
from chartstore.appstore.schemas import InstallAppVersionRequest
from chartstore.exceptions import DeploymentEngineError, EntityNotFoundError
from chartstore.settings import ServerMode
from tests.conftest import fetch_all

pytestmark = pytest.mark.integration


async def _install(service, seed, **overrides) -> InstallAppVersionRequest:
    data = {
        "app_name": "redis",
        "user_id": 7,
        "environment_id": seed.environment_id,
        "app_store_version": seed.app_store_version_id,
    }
    data.update(overrides)
    return await service.install_app(InstallAppVersionRequest(**data))


def _delete_request(installed: InstallAppVersionRequest, **overrides) -> InstallAppVersionRequest:
    data = {
        "app_name": installed.app_name,
        "app_id": installed.app_id,
        "installed_app_id": installed.installed_app_id,
        "environment_id": installed.environment_id,
        "user_id": 8,
    }
    data.update(overrides)
    return InstallAppVersionRequest(**data)


@pytest.mark.asyncio
async def test_delete_deactivates_rows_and_calls_engine(
    make_service, seed, session_factory, gitops_engine
) -> None:
    service = make_service()
    installed = await _install(service, seed)

    await service.delete_installed_app(_delete_request(installed))

    apps = await fetch_all(session_factory, App)
    assert apps[0].active is False
    assert apps[0].updated_by == 8

    installed_apps = await fetch_all(session_factory, InstalledApp)
    assert installed_apps[0].active is False
    # Written by the engine through the shared unit of work
    assert installed_apps[0].status == AppstoreDeploymentStatus.DEPLOY_DELETED.value

    versions = await fetch_all(session_factory, InstalledAppVersion)
    assert all(v.active is False for v in versions)

    assert gitops_engine.deleted == [("redis", "prod")]


@pytest.mark.asyncio
async def test_engine_failure_rolls_back_all_soft_deletes(
    make_service, seed, session_factory, gitops_engine
) -> None:
    service = make_service()
    installed = await _install(service, seed)
    gitops_engine.delete_error = DeploymentEngineError("controller unavailable")

    with pytest.raises(DeploymentEngineError):
        await service.delete_installed_app(_delete_request(installed))

    apps = await fetch_all(session_factory, App)
    assert apps[0].active is True

    installed_apps = await fetch_all(session_factory, InstalledApp)
    assert installed_apps[0].active is True
    assert installed_apps[0].status == AppstoreDeploymentStatus.DEPLOY_SUCCESS.value

    versions = await fetch_all(session_factory, InstalledAppVersion)
    assert all(v.active is True for v in versions)


@pytest.mark.asyncio
async def test_second_delete_fails_and_changes_nothing(
    make_service, seed, session_factory, gitops_engine
) -> None:
    service = make_service()
    installed = await _install(service, seed)
    await service.delete_installed_app(_delete_request(installed))

    with pytest.raises(EntityNotFoundError) as exc_info:
        await service.delete_installed_app(_delete_request(installed))

    assert exc_info.value.entity == "InstalledApp"
    assert len(gitops_engine.deleted) == 1
    apps = await fetch_all(session_factory, App)
    assert apps[0].active is False


@pytest.mark.asyncio
async def test_missing_environment_is_fatal(
    make_service, seed, session_factory, gitops_engine
) -> None:
    service = make_service()
    installed = await _install(service, seed)

    with pytest.raises(EntityNotFoundError) as exc_info:
        await service.delete_installed_app(_delete_request(installed, environment_id=9999))

    assert exc_info.value.entity == "Environment"
    assert gitops_engine.deleted == []
    apps = await fetch_all(session_factory, App)
    assert apps[0].active is True


@pytest.mark.asyncio
async def test_delete_of_ea_only_record_uses_helm_under_full_mode(
    make_service, seed, helm_engine, gitops_engine
) -> None:
    installed = await _install(
        make_service(ServerMode.EA_ONLY), seed, cluster_id=seed.cluster_id, namespace=seed.namespace
    )

    await make_service(ServerMode.FULL).delete_installed_app(_delete_request(installed))

    assert helm_engine.deleted == [("redis", "prod")]
    assert gitops_engine.deleted == []


@pytest.mark.asyncio
async def test_app_name_is_free_after_delete(make_service, seed, session_factory) -> None:
    service = make_service()
    installed = await _install(service, seed)
    await service.delete_installed_app(_delete_request(installed))

    reinstalled = await _install(service, seed)

    assert reinstalled.app_id != installed.app_id
    active = await fetch_all(session_factory, App, App.active.is_(True))
    assert [a.id for a in active] == [reinstalled.app_id]
