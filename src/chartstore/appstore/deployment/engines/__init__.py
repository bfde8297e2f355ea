"""Deployment engine variants."""

from .base import DeploymentEngine, EngineKind
from .client import DeploymentEngineClient
from .gitops import GitOpsDeploymentEngine
from .helm import HelmDeploymentEngine

__all__ = [
    "DeploymentEngine",
    "EngineKind",
    "DeploymentEngineClient",
    "GitOpsDeploymentEngine",
    "HelmDeploymentEngine",
]
