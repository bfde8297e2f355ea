"""Create cluster, app and app store tables

Revision ID: 3c1e9a7b2d4f
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "3c1e9a7b2d4f"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _audit() -> list[sa.Column]:
    return [
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "cluster",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cluster_name", sa.String(length=250), nullable=False),
        sa.Column("server_url", sa.String(length=500), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        *_audit(),
        sa.UniqueConstraint("cluster_name"),
    )

    op.create_table(
        "environment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=250), nullable=False),
        sa.Column("cluster_id", sa.Integer(), sa.ForeignKey("cluster.id"), nullable=False),
        sa.Column("namespace", sa.String(length=250), nullable=False, server_default=""),
        sa.Column("default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        *_audit(),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("cluster_id", "namespace", name="uq_environment_cluster_namespace"),
    )
    op.create_index("ix_environment_cluster_id", "environment", ["cluster_id"])

    # No unique constraint on app_name: uniqueness among active rows is reconciled in code.
    op.create_table(
        "app",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("app_name", sa.String(length=250), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("app_store", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("app_offering_mode", sa.String(length=50), nullable=False, server_default="FULL"),
        *_timestamps(),
        *_audit(),
    )
    op.create_index("ix_app_app_name", "app", ["app_name"])

    op.create_table(
        "chart_repo",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=250), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        *_audit(),
    )

    op.create_table(
        "app_store",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=250), nullable=False),
        sa.Column("chart_repo_id", sa.Integer(), sa.ForeignKey("chart_repo.id"), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "app_store_application_version",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("app_store_id", sa.Integer(), sa.ForeignKey("app_store.id"), nullable=False),
        sa.Column("name", sa.String(length=250), nullable=False),
        sa.Column("version", sa.String(length=100), nullable=False),
        sa.Column("values_yaml", sa.Text(), nullable=True),
        sa.Column("deprecated", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(
        "ix_app_store_application_version_app_store_id",
        "app_store_application_version",
        ["app_store_id"],
    )

    op.create_table(
        "installed_apps",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("app_id", sa.Integer(), sa.ForeignKey("app.id"), nullable=False),
        sa.Column("environment_id", sa.Integer(), sa.ForeignKey("environment.id"), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="DEPLOY_INIT"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        *_audit(),
    )
    op.create_index("ix_installed_apps_app_id", "installed_apps", ["app_id"])
    op.create_index("ix_installed_apps_environment_id", "installed_apps", ["environment_id"])

    op.create_table(
        "installed_app_versions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "installed_app_id", sa.Integer(), sa.ForeignKey("installed_apps.id"), nullable=False
        ),
        sa.Column(
            "app_store_application_version_id",
            sa.Integer(),
            sa.ForeignKey("app_store_application_version.id"),
            nullable=False,
        ),
        sa.Column("values_yaml", sa.Text(), nullable=True),
        sa.Column("reference_value_id", sa.Integer(), nullable=True),
        sa.Column("reference_value_kind", sa.String(length=50), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        *_audit(),
    )
    op.create_index(
        "ix_installed_app_versions_installed_app_id", "installed_app_versions", ["installed_app_id"]
    )

    op.create_table(
        "cluster_installed_apps",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cluster_id", sa.Integer(), sa.ForeignKey("cluster.id"), nullable=False),
        sa.Column(
            "installed_app_id", sa.Integer(), sa.ForeignKey("installed_apps.id"), nullable=False
        ),
        *_timestamps(),
        *_audit(),
    )
    op.create_index("ix_cluster_installed_apps_cluster_id", "cluster_installed_apps", ["cluster_id"])
    op.create_index(
        "ix_cluster_installed_apps_installed_app_id", "cluster_installed_apps", ["installed_app_id"]
    )

    op.create_table(
        "app_store_charts_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "installed_app_version_id",
            sa.Integer(),
            sa.ForeignKey("installed_app_versions.id"),
            nullable=False,
        ),
        sa.Column("values_yaml", sa.Text(), nullable=True),
        sa.Column("deployed_by", sa.Integer(), nullable=True),
        sa.Column("deployed_on", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        *_audit(),
    )
    op.create_index(
        "ix_app_store_charts_history_installed_app_version_id",
        "app_store_charts_history",
        ["installed_app_version_id"],
    )


def downgrade() -> None:
    op.drop_table("app_store_charts_history")
    op.drop_table("cluster_installed_apps")
    op.drop_table("installed_app_versions")
    op.drop_table("installed_apps")
    op.drop_table("app_store_application_version")
    op.drop_table("app_store")
    op.drop_table("chart_repo")
    op.drop_table("app")
    op.drop_table("environment")
    op.drop_table("cluster")
