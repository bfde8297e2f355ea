"""Tests for installed-app listing and lookups."""

import pytest

from chartstore.appstore.deployment.service import RESOURCE_TREE_NOT_FOUND_STATUS
from chartstore.appstore.models import ChartRepo
from chartstore.appstore.schemas import InstallAppVersionRequest
from chartstore.exceptions import (
    DeploymentEngineError,
    EntityNotFoundError,
    ResourceTreeNotFoundError,
)
from chartstore.settings import ServerMode

pytestmark = pytest.mark.integration


async def _install(service, seed, app_name: str, **overrides) -> InstallAppVersionRequest:
    data = {
        "app_name": app_name,
        "user_id": 7,
        "environment_id": seed.environment_id,
        "app_store_version": seed.app_store_version_id,
    }
    data.update(overrides)
    return await service.install_app(InstallAppVersionRequest(**data))


class TestListing:
    @pytest.mark.asyncio
    async def test_lists_installs_with_engine_status(self, make_service, seed, gitops_engine) -> None:
        service = make_service()
        redis = await _install(service, seed, "redis")
        grafana = await _install(service, seed, "grafana")
        gitops_engine.statuses = {"redis": "Healthy", "grafana": "Degraded"}

        responses = await service.get_all_installed_apps_by_app_store_id(seed.app_store_id)

        assert [(r.app_name, r.status) for r in responses] == [
            ("redis", "Healthy"),
            ("grafana", "Degraded"),
        ]
        assert responses[0].installed_apps_id == redis.installed_app_id
        assert responses[1].installed_app_version_id == grafana.installed_app_version_id
        assert responses[0].environment_name == "prod"
        assert responses[0].deployed_by == 7
        assert responses[0].cluster_id is None
        assert responses[0].namespace is None

    @pytest.mark.asyncio
    async def test_missing_resource_tree_maps_to_not_found(
        self, make_service, seed, gitops_engine
    ) -> None:
        service = make_service()
        await _install(service, seed, "redis")
        gitops_engine.statuses = {"redis": ResourceTreeNotFoundError("no tree")}

        responses = await service.get_all_installed_apps_by_app_store_id(seed.app_store_id)

        assert responses[0].status == RESOURCE_TREE_NOT_FOUND_STATUS == "Not Found"

    @pytest.mark.asyncio
    async def test_other_engine_errors_propagate(self, make_service, seed, gitops_engine) -> None:
        service = make_service()
        await _install(service, seed, "redis")
        gitops_engine.statuses = {"redis": DeploymentEngineError("unauthorized", status_code=401)}

        with pytest.raises(DeploymentEngineError):
            await service.get_all_installed_apps_by_app_store_id(seed.app_store_id)

    @pytest.mark.asyncio
    async def test_ea_only_records_carry_cluster_and_namespace(
        self, make_service, seed, helm_engine, gitops_engine
    ) -> None:
        await _install(
            make_service(ServerMode.EA_ONLY),
            seed,
            "redis",
            cluster_id=seed.cluster_id,
            namespace=seed.namespace,
        )
        await _install(make_service(ServerMode.FULL), seed, "grafana")
        helm_engine.statuses = {"redis": "Deployed"}

        responses = await make_service(ServerMode.FULL).get_all_installed_apps_by_app_store_id(
            seed.app_store_id
        )

        by_name = {r.app_name: r for r in responses}
        assert by_name["redis"].status == "Deployed"
        assert by_name["redis"].cluster_id == seed.cluster_id
        assert by_name["redis"].namespace == "prod-ns"
        assert by_name["redis"].app_offering_mode == ServerMode.EA_ONLY.value
        assert by_name["grafana"].cluster_id is None

    @pytest.mark.asyncio
    async def test_deleted_installs_are_not_listed(self, make_service, seed) -> None:
        service = make_service()
        installed = await _install(service, seed, "redis")
        await service.delete_installed_app(
            InstallAppVersionRequest(
                app_name="redis",
                app_id=installed.app_id,
                installed_app_id=installed.installed_app_id,
                environment_id=installed.environment_id,
            )
        )

        assert await service.get_all_installed_apps_by_app_store_id(seed.app_store_id) == []

    @pytest.mark.asyncio
    async def test_unknown_app_store_lists_nothing(self, make_service, seed) -> None:
        assert await make_service().get_all_installed_apps_by_app_store_id(9999) == []


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_installed_app(self, make_service, seed) -> None:
        service = make_service()
        installed = await _install(service, seed, "redis")

        found = await service.get_installed_app(installed.installed_app_id)

        assert found.installed_app_id == installed.installed_app_id
        assert found.app_id == installed.app_id
        assert found.app_name == "redis"
        assert found.environment_name == "prod"
        assert found.namespace == "prod-ns"
        assert found.cluster_id == seed.cluster_id

    @pytest.mark.asyncio
    async def test_get_unknown_installed_app_raises(self, make_service, seed) -> None:
        with pytest.raises(EntityNotFoundError):
            await make_service().get_installed_app(9999)

    @pytest.mark.asyncio
    async def test_is_chart_repo_active(self, make_service, seed, session_factory) -> None:
        service = make_service()
        assert await service.is_chart_repo_active(seed.app_store_version_id) is True

        async with session_factory() as session:
            chart_repo = await session.get(ChartRepo, seed.chart_repo_id)
            chart_repo.active = False
            await session.commit()

        assert await service.is_chart_repo_active(seed.app_store_version_id) is False
