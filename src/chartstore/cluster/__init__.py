"""Cluster and environment registry."""

from .models import Cluster, Environment
from .repository import ClusterRepository, EnvironmentRepository
from .schemas import ClusterBean, EnvironmentBean
from .service import ClusterService, EnvironmentService, build_environment_identifier

__all__ = [
    "Cluster",
    "Environment",
    "ClusterRepository",
    "EnvironmentRepository",
    "ClusterBean",
    "EnvironmentBean",
    "ClusterService",
    "EnvironmentService",
    "build_environment_identifier",
]
