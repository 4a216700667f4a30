"""
Domain models — Pydantic types and plain records used across aurora.

All models are re-exported here for convenient access:

    from aurora.core.models import Settings, ProjectRequest, AppConfig, Env
"""

from aurora.core.models.database import AppConfig, DBConnection, DBDriver, DBResolver
from aurora.core.models.project import (
    LocalRepository,
    ProjectRequest,
    RepoState,
    RewriteTarget,
)
from aurora.core.models.runtime import RUNTIME_ENV_KEY, Env
from aurora.core.models.settings import (
    Settings,
    TemplateSource,
    TemplateVariant,
    Timeouts,
    Toolchain,
)

__all__ = [
    # database.py
    "AppConfig",
    "DBConnection",
    "DBDriver",
    "DBResolver",
    # runtime.py
    "Env",
    # project.py
    "LocalRepository",
    "ProjectRequest",
    "RUNTIME_ENV_KEY",
    "RepoState",
    "RewriteTarget",
    # settings.py
    "Settings",
    "TemplateSource",
    "TemplateVariant",
    "Timeouts",
    "Toolchain",
]
