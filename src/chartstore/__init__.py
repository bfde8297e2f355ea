"""
Chartstore - app store deployment orchestration.

Installs and removes helm charts from a chart catalogue onto clusters,
keeping installation bookkeeping in a relational database and delegating
the actual deployment to one of two engines:
- Direct apply (helm) for EA_ONLY servers and records
- GitOps for everything else
"""

__version__ = "0.1.0"


def get_version() -> str:
    """Get chartstore version."""
    return __version__


from chartstore.logging import get_logger, operation_context, setup_logging  # noqa: E402
from chartstore.settings import ServerMode, Settings, get_settings  # noqa: E402

__all__ = [
    "ServerMode",
    "Settings",
    "get_logger",
    "get_settings",
    "get_version",
    "operation_context",
    "setup_logging",
]
