"""
Pydantic schemas exchanged with callers of the deployment service.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InstallAppVersionRequest(BaseModel):
    """Install/delete request. The orchestrator fills in ids as it creates rows."""

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: int | None = None
    app_id: int | None = None
    app_name: str = Field(..., min_length=1, max_length=250)
    team_id: int | None = None
    user_id: int | None = None

    environment_id: int | None = None
    environment_name: str | None = None
    cluster_id: int | None = None
    namespace: str | None = None

    app_store_version: int | None = Field(None, description="AppStoreApplicationVersion id")
    values_override_yaml: str = ""
    reference_value_id: int | None = None
    reference_value_kind: str | None = None

    installed_app_id: int | None = None
    installed_app_version_id: int | None = None
    default_cluster_component: bool = False
    app_offering_mode: str | None = None


class InstalledAppDetail(BaseModel):
    """Flattened row of an installed app version used by status listing."""

    model_config = ConfigDict(from_attributes=True)

    installed_app_id: int
    installed_app_version_id: int
    app_store_application_version_id: int
    app_id: int
    app_name: str
    app_offering_mode: str
    environment_id: int
    environment_name: str
    cluster_id: int
    namespace: str
    updated_at: datetime | None = None
    updated_by: int | None = None


class InstalledAppsResponse(BaseModel):
    """One entry of the installed-apps listing."""

    environment_name: str
    app_name: str
    deployed_at: datetime | None = None
    deployed_by: int | None = None
    status: str
    app_store_application_version_id: int
    installed_app_version_id: int
    installed_apps_id: int
    environment_id: int
    app_offering_mode: str
    cluster_id: int | None = None
    namespace: str | None = None
