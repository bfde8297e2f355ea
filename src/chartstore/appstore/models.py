"""
App store tables: the chart catalogue and the installation bookkeeping.
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..apps.models import App
from ..cluster.models import Environment
from ..db import AuditMixin, Base, TimestampMixin


class AppstoreDeploymentStatus(str, Enum):
    """Lifecycle status of an installed app."""

    DEPLOY_INIT = "DEPLOY_INIT"
    DEPLOY_INPROGRESS = "DEPLOY_INPROGRESS"
    DEPLOY_SUCCESS = "DEPLOY_SUCCESS"
    DEPLOY_FAILED = "DEPLOY_FAILED"
    DEPLOY_DELETED = "DEPLOY_DELETED"
    DEPLOY_DELETE_FAILED = "DEPLOY_DELETE_FAILED"


class ReferenceValueKind(str, Enum):
    """Where the override values of an installed version came from."""

    DEFAULT = "DEFAULT"
    TEMPLATE = "TEMPLATE"
    DEPLOYED = "DEPLOYED"


# ==========================================
# Chart catalogue
# ==========================================


class ChartRepo(Base, TimestampMixin, AuditMixin):
    """A helm chart repository."""

    __tablename__ = "chart_repo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class AppStore(Base, TimestampMixin):
    """A chart as listed in the store."""

    __tablename__ = "app_store"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    chart_repo_id: Mapped[int] = mapped_column(ForeignKey("chart_repo.id"), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    chart_repo: Mapped[ChartRepo] = relationship(lazy="joined")


class AppStoreApplicationVersion(Base, TimestampMixin):
    """One published version of a chart."""

    __tablename__ = "app_store_application_version"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_store_id: Mapped[int] = mapped_column(ForeignKey("app_store.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    version: Mapped[str] = mapped_column(String(100), nullable=False)
    values_yaml: Mapped[str | None] = mapped_column(Text, nullable=True)
    deprecated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    app_store: Mapped[AppStore] = relationship(lazy="joined")


# ==========================================
# Installation bookkeeping
# ==========================================


class InstalledApp(Base, TimestampMixin, AuditMixin):
    """One installation of an app into an environment. Soft-deactivated, never deleted."""

    __tablename__ = "installed_apps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[int] = mapped_column(ForeignKey("app.id"), nullable=False, index=True)
    environment_id: Mapped[int] = mapped_column(
        ForeignKey("environment.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(50), default=AppstoreDeploymentStatus.DEPLOY_INIT.value, nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    app: Mapped[App] = relationship(lazy="joined")
    environment: Mapped[Environment] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<InstalledApp(id={self.id}, app_id={self.app_id}, "
            f"environment_id={self.environment_id}, status={self.status})>"
        )


class InstalledAppVersion(Base, TimestampMixin, AuditMixin):
    """A deploy attempt of an installed app. Append-only; ``active`` marks the effective one."""

    __tablename__ = "installed_app_versions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    installed_app_id: Mapped[int] = mapped_column(
        ForeignKey("installed_apps.id"), nullable=False, index=True
    )
    app_store_application_version_id: Mapped[int] = mapped_column(
        ForeignKey("app_store_application_version.id"), nullable=False
    )
    values_yaml: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_value_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reference_value_kind: Mapped[str | None] = mapped_column(String(50), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class ClusterInstalledApps(Base, TimestampMixin, AuditMixin):
    """Marks an installed app as the platform-managed component of its cluster."""

    __tablename__ = "cluster_installed_apps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cluster_id: Mapped[int] = mapped_column(ForeignKey("cluster.id"), nullable=False, index=True)
    installed_app_id: Mapped[int] = mapped_column(
        ForeignKey("installed_apps.id"), nullable=False, index=True
    )


class AppStoreChartsHistory(Base, TimestampMixin, AuditMixin):
    """Values deployed for an installed app version, one row per deployment event."""

    __tablename__ = "app_store_charts_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    installed_app_version_id: Mapped[int] = mapped_column(
        ForeignKey("installed_app_versions.id"), nullable=False, index=True
    )
    values_yaml: Mapped[str | None] = mapped_column(Text, nullable=True)
    deployed_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deployed_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
