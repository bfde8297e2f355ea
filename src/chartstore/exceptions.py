"""
Chart store exceptions.

Every error carries a machine-readable code, an HTTP-ish status, an internal
message for logs and a user-facing message for callers.
"""

from typing import Any


class ChartStoreError(Exception):
    """
    Base error for deployment orchestration.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        status_code: HTTP status code for this error type
        user_message: Message safe to show to end users
        internal_message: Message meant for logs and operators
        context: Additional context data about the error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 400,
        user_message: str | None = None,
        internal_message: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or "CHARTSTORE_ERROR"
        self.status_code = status_code
        self.user_message = user_message or message
        self.internal_message = internal_message or message
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "user_message": self.user_message,
            "internal_message": self.internal_message,
            "context": self.context,
        }


class ConfigurationError(ChartStoreError):
    """Configuration error."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", status_code=500)


class EntityNotFoundError(ChartStoreError):
    """No active row matched the lookup."""

    def __init__(self, entity: str, **lookup: Any) -> None:
        details = ", ".join(f"{key}={value}" for key, value in lookup.items())
        super().__init__(
            f"{entity} not found ({details})" if details else f"{entity} not found",
            "ENTITY_NOT_FOUND",
            status_code=404,
            context={"entity": entity, **lookup},
        )
        self.entity = entity


class AppAlreadyExistsError(ChartStoreError):
    """An active app with the requested name already exists."""

    def __init__(self, app_name: str) -> None:
        super().__init__(
            "app already exists",
            "APP_ALREADY_EXISTS",
            status_code=409,
            user_message=f"app already exists with name {app_name}",
            internal_message="app already exists",
            context={"app_name": app_name},
        )
        self.app_name = app_name


class DeploymentEngineError(ChartStoreError):
    """The deployment engine rejected or failed a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "DEPLOYMENT_ENGINE_ERROR", status_code=502, context=context)
        self.upstream_status_code = status_code


class ResourceTreeNotFoundError(DeploymentEngineError):
    """The engine has no resource tree for the application."""

    def __init__(self, message: str, status_code: int | None = 404) -> None:
        super().__init__(message, status_code=status_code)
        self.error_code = "RESOURCE_TREE_NOT_FOUND"


__all__ = [
    "ChartStoreError",
    "ConfigurationError",
    "EntityNotFoundError",
    "AppAlreadyExistsError",
    "DeploymentEngineError",
    "ResourceTreeNotFoundError",
]
