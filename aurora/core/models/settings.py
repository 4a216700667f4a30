"""
Settings model — how aurora itself is configured.

Loaded from aurora.yml (or built from defaults), this describes where
new projects come from and which external tools are invoked.  A single
instance is built at startup and passed to whatever needs it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_TEMPLATE_URL = "https://github.com/stubborn-gaga-0805/prepare-to-go.git"
DEFAULT_TEMPLATE_MODULE = "github.com/stubborn-gaga-0805/prepare-to-go"
DEFAULT_REWRITE_DIRS = ["api", "cmd", "configs", "internal", "third_party"]


class TemplateVariant(str, Enum):
    """The two flavours of the template repository."""

    PROJECT = "project"
    DEMO = "demo"


class TemplateSource(BaseModel):
    """The remote template repository and how to fetch it.

    Clone policy is fixed (depth 1, single branch, no tags); only the
    location, branch table and rewrite scope are configurable.
    """

    url: str = DEFAULT_TEMPLATE_URL
    module: str = DEFAULT_TEMPLATE_MODULE
    branches: dict[TemplateVariant, str] = Field(
        default_factory=lambda: {
            TemplateVariant.PROJECT: "main",
            TemplateVariant.DEMO: "demo",
        }
    )
    canonical_branch: str = "main"
    rewrite_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_REWRITE_DIRS))
    entry_file: str = "main.go"

    @field_validator("branches")
    @classmethod
    def _require_both_variants(
        cls, value: dict[TemplateVariant, str]
    ) -> dict[TemplateVariant, str]:
        missing = [v.value for v in TemplateVariant if not value.get(v)]
        if missing:
            raise ValueError(f"branch table is missing: {', '.join(missing)}")
        return value

    @field_validator("module", "canonical_branch", "entry_file")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def branch_for(self, demo: bool) -> str:
        """Template branch to clone for the requested variant."""
        variant = TemplateVariant.DEMO if demo else TemplateVariant.PROJECT
        return self.branches[variant]


class Toolchain(BaseModel):
    """Executables aurora shells out to."""

    git: str = "git"
    go: str = "go"
    gentool: str = "gentool"


class Timeouts(BaseModel):
    """Wall-clock limits, in seconds."""

    create: float = Field(default=300, gt=0)
    clone: float = Field(default=180, gt=0)
    tool: float = Field(default=300, gt=0)


class Settings(BaseModel):
    """Root settings object."""

    template: TemplateSource = Field(default_factory=TemplateSource)
    toolchain: Toolchain = Field(default_factory=Toolchain)
    timeouts: Timeouts = Field(default_factory=Timeouts)
