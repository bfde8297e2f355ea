"""
Cluster registry schemas.
"""

from pydantic import BaseModel, ConfigDict


class EnvironmentBean(BaseModel):
    """Environment creation payload / read model."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    environment: str
    cluster_id: int
    namespace: str
    default: bool = False
    active: bool = True


class ClusterBean(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cluster_name: str
    server_url: str | None = None
    active: bool = True
