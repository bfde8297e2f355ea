"""
App store deployment.

Public API:
    AppStoreDeploymentService: install/delete orchestration
    create_app_store_deployment_service: wiring from settings
"""

from .environment import EnvironmentResolver
from .registrar import AppRegistrar
from .selector import DeploymentEngineSelector, EngineSelection, select_engine_kind
from .service import (
    RESOURCE_TREE_NOT_FOUND_STATUS,
    AppStoreDeploymentService,
    create_app_store_deployment_service,
)

__all__ = [
    "AppRegistrar",
    "AppStoreDeploymentService",
    "DeploymentEngineSelector",
    "EngineSelection",
    "EnvironmentResolver",
    "RESOURCE_TREE_NOT_FOUND_STATUS",
    "create_app_store_deployment_service",
    "select_engine_kind",
]
