"""
Deployment engine contract.

Two variants implement it: a direct-apply (helm) engine and a GitOps engine.
The orchestrator only ever talks to this interface.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ....unit_of_work import UnitOfWork
from ...models import InstalledApp
from ...schemas import InstallAppVersionRequest, InstalledAppDetail


class EngineKind(str, Enum):
    """Deployment engine variants."""

    HELM = "helm"
    GITOPS = "gitops"


class DeploymentEngine(ABC):
    """Performs the actual deployment of an installed app."""

    kind: EngineKind

    @abstractmethod
    async def install_app(self, request: InstallAppVersionRequest) -> None:
        """Deploy the chart described by an already-committed install request."""

    @abstractmethod
    async def delete_installed_app(
        self,
        app_name: str,
        environment_name: str,
        request: InstallAppVersionRequest,
        installed_app: InstalledApp,
        uow: UnitOfWork,
    ) -> None:
        """
        Remove the deployment.

        Runs inside the orchestrator's open unit of work; writes made through
        ``uow`` commit or roll back together with the soft-deletes.
        """

    @abstractmethod
    async def get_app_status(self, record: InstalledAppDetail, token: str | None = None) -> str:
        """Return the live status string of an installed app."""
