"""
Application table.

An app row is the named unit that installations hang off. Names are unique
among active rows only; inactive rows are kept for history.
"""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db import AuditMixin, Base, TimestampMixin
from ..settings import ServerMode


class App(Base, TimestampMixin, AuditMixin):
    """An application, created by the app store when a chart is installed."""

    __tablename__ = "app"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_name: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    team_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    app_store: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Mode the row was created under; engine selection honours it after a global mode change.
    app_offering_mode: Mapped[str] = mapped_column(
        String(50), default=ServerMode.FULL.value, nullable=False
    )

    def __repr__(self) -> str:
        return f"<App(id={self.id}, app_name={self.app_name!r}, active={self.active})>"
