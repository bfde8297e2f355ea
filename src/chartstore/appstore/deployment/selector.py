"""
Deployment engine selection.

The engine is a function of the configured server mode and the mode the
record was created under: if either is EA_ONLY the direct-apply engine
governs the record, otherwise the GitOps engine does. Historical records keep
the engine they were created with after a global mode change.
"""

from dataclasses import dataclass

from ...settings import ServerMode
from .engines.base import DeploymentEngine, EngineKind


def select_engine_kind(
    server_mode: ServerMode | str, offering_mode: ServerMode | str | None = None
) -> EngineKind:
    """Pure selection rule."""
    modes = {ServerMode(server_mode)}
    if offering_mode:
        modes.add(ServerMode(offering_mode))
    if ServerMode.EA_ONLY in modes:
        return EngineKind.HELM
    return EngineKind.GITOPS


@dataclass(frozen=True)
class EngineSelection:
    kind: EngineKind
    engine: DeploymentEngine


class DeploymentEngineSelector:
    """Holds both engines and hands out the one that governs a record."""

    def __init__(
        self,
        server_mode: ServerMode,
        helm_engine: DeploymentEngine,
        gitops_engine: DeploymentEngine,
    ) -> None:
        self.server_mode = server_mode
        self._engines = {
            EngineKind.HELM: helm_engine,
            EngineKind.GITOPS: gitops_engine,
        }

    def select(self, offering_mode: ServerMode | str | None = None) -> EngineSelection:
        kind = select_engine_kind(self.server_mode, offering_mode)
        return EngineSelection(kind=kind, engine=self._engines[kind])
