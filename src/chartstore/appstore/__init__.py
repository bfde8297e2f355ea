"""App store catalogue and installation bookkeeping."""

from .history import AppStoreChartsHistoryService
from .models import (
    AppStore,
    AppStoreApplicationVersion,
    AppStoreChartsHistory,
    AppstoreDeploymentStatus,
    ChartRepo,
    ClusterInstalledApps,
    InstalledApp,
    InstalledAppVersion,
    ReferenceValueKind,
)
from .repository import (
    AppStoreApplicationVersionRepository,
    AppStoreChartsHistoryRepository,
    ClusterInstalledAppsRepository,
    InstalledAppRepository,
)
from .schemas import InstallAppVersionRequest, InstalledAppDetail, InstalledAppsResponse

__all__ = [
    "AppStore",
    "AppStoreApplicationVersion",
    "AppStoreChartsHistory",
    "AppstoreDeploymentStatus",
    "ChartRepo",
    "ClusterInstalledApps",
    "InstalledApp",
    "InstalledAppVersion",
    "ReferenceValueKind",
    "AppStoreApplicationVersionRepository",
    "AppStoreChartsHistoryRepository",
    "ClusterInstalledAppsRepository",
    "InstalledAppRepository",
    "AppStoreChartsHistoryService",
    "InstallAppVersionRequest",
    "InstalledAppDetail",
    "InstalledAppsResponse",
]
