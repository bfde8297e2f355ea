"""
Model registry.

Importing this module registers every table with ``Base.metadata``; used by
table creation and alembic autogenerate.
"""

from chartstore.apps.models import App
from chartstore.appstore.models import (
    AppStore,
    AppStoreApplicationVersion,
    AppStoreChartsHistory,
    ChartRepo,
    ClusterInstalledApps,
    InstalledApp,
    InstalledAppVersion,
)
from chartstore.cluster.models import Cluster, Environment
from chartstore.db import Base

__all__ = [
    "Base",
    "App",
    "AppStore",
    "AppStoreApplicationVersion",
    "AppStoreChartsHistory",
    "ChartRepo",
    "Cluster",
    "ClusterInstalledApps",
    "Environment",
    "InstalledApp",
    "InstalledAppVersion",
]
