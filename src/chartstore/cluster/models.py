"""
Cluster and environment tables.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import AuditMixin, Base, TimestampMixin


class Cluster(Base, TimestampMixin, AuditMixin):
    """A registered Kubernetes cluster."""

    __tablename__ = "cluster"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cluster_name: Mapped[str] = mapped_column(String(250), nullable=False, unique=True)
    server_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Cluster(id={self.id}, cluster_name={self.cluster_name!r})>"


class Environment(Base, TimestampMixin, AuditMixin):
    """A namespace on a cluster that apps are installed into."""

    __tablename__ = "environment"
    __table_args__ = (
        UniqueConstraint("cluster_id", "namespace", name="uq_environment_cluster_namespace"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False, unique=True)
    cluster_id: Mapped[int] = mapped_column(ForeignKey("cluster.id"), nullable=False, index=True)
    namespace: Mapped[str] = mapped_column(String(250), nullable=False, default="")
    default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    cluster: Mapped[Cluster] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<Environment(id={self.id}, name={self.name!r}, "
            f"cluster_id={self.cluster_id}, namespace={self.namespace!r})>"
        )
