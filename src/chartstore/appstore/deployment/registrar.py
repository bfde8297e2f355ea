"""
App registration for app store installs.

There is no unique constraint on app names; uniqueness among active rows is
enforced by re-reading after the insert and deactivating every row but the
earliest. A caller whose row loses gets AppAlreadyExistsError.
"""

import structlog

from ...apps.models import App
from ...apps.repository import AppRepository
from ...exceptions import AppAlreadyExistsError
from ...settings import ServerMode
from ...unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AppRegistrar:
    def __init__(self, server_mode: ServerMode, app_repository: AppRepository | None = None) -> None:
        self.server_mode = server_mode
        self.app_repository = app_repository or AppRepository()

    async def ensure_app(
        self,
        uow: UnitOfWork,
        app_name: str,
        team_id: int | None,
        user_id: int | None,
    ) -> App:
        """
        Create the active app row for ``app_name`` in the caller's unit of work.

        Raises:
            AppAlreadyExistsError: An active app with this name exists, or a
                concurrent insert won the race for it.
        """
        session = uow.session
        existing = await self.app_repository.find_active_by_name(session, app_name)
        if existing is not None:
            logger.info("App already exists", app_name=app_name, app_id=existing.id)
            raise AppAlreadyExistsError(app_name)

        app = App(
            app_name=app_name,
            active=True,
            team_id=team_id,
            app_store=True,
            app_offering_mode=self.server_mode.value,
            created_by=user_id,
            updated_by=user_id,
        )
        try:
            await self.app_repository.save(session, app)
        except Exception as e:
            logger.error("Error saving app", app_name=app_name, error=str(e))
            raise

        apps = await self.app_repository.find_active_list_by_name(session, app_name)
        if len(apps) > 1:
            winner = apps[0]
            for duplicate in apps[1:]:
                duplicate.active = False
                duplicate.updated_by = user_id
                await self.app_repository.update(session, duplicate)
            logger.warning(
                "Duplicate apps deactivated",
                app_name=app_name,
                kept_app_id=winner.id,
                deactivated_app_ids=[a.id for a in apps[1:]],
            )
            if winner.id != app.id:
                raise AppAlreadyExistsError(app_name)

        return app
