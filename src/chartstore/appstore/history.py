"""
Chart history: append-only record of the values deployed per installed app version.
"""

from datetime import UTC, datetime

import structlog

from ..unit_of_work import UnitOfWork
from .models import AppStoreChartsHistory
from .repository import AppStoreChartsHistoryRepository

logger = structlog.get_logger(__name__)


class AppStoreChartsHistoryService:
    def __init__(self, repository: AppStoreChartsHistoryRepository | None = None) -> None:
        self.repository = repository or AppStoreChartsHistoryRepository()

    async def create_app_store_charts_history(
        self,
        uow: UnitOfWork,
        installed_app_version_id: int,
        values_yaml: str | None,
        user_id: int | None,
    ) -> AppStoreChartsHistory:
        """Insert a history row in the given unit of work."""
        now = datetime.now(UTC)
        history = AppStoreChartsHistory(
            installed_app_version_id=installed_app_version_id,
            values_yaml=values_yaml,
            deployed_by=user_id,
            deployed_on=now,
            created_by=user_id,
            updated_by=user_id,
        )
        try:
            await self.repository.create_history(uow.session, history)
        except Exception as e:
            logger.error(
                "Error creating history entry for app store charts",
                installed_app_version_id=installed_app_version_id,
                error=str(e),
            )
            raise
        return history
