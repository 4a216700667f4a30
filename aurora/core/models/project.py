"""
Project creation models — what the user asked for and what ends up on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


class ProjectRequest(BaseModel):
    """User intent for a new project.

    Built once from CLI arguments and prompts; frozen so nothing
    downstream can change it once the creation pipeline has started.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    parent: Path
    demo: bool = False

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name must not be empty")
        if value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"invalid project name: {value!r}")
        return value

    @field_validator("parent")
    @classmethod
    def _absolute_parent(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"parent directory must be absolute: {value}")
        return value

    @property
    def target(self) -> Path:
        """Absolute path of the project directory."""
        return self.parent / self.name


class RepoState(str, Enum):
    """Lifecycle of a freshly cloned working copy."""

    CLONED = "cloned"
    DETACHED = "detached"
    NORMALIZED = "normalized"


@dataclass
class LocalRepository:
    """The cloned working copy on disk."""

    path: Path
    branch: str
    remotes: list[str]
    state: RepoState = RepoState.CLONED


@dataclass
class RewriteTarget:
    """One file due for identifier substitution."""

    path: Path
    content: bytes
    mode: int
