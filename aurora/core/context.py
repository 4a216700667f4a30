"""
Command context — the capabilities every aurora command shares.

Built ONCE by the root command and handed to sub-commands through
``ctx.obj["runtime"]``.  Commands hold it by composition and ask it
where the project lives, where the binary goes, and which settings
apply.  Nothing in here is module-level state:

    - CLI:    main.py → CommandContext.create(settings)
    - Tests:  CommandContext(settings=Settings(), working_dir=tmp_path)
"""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field
from pathlib import Path

from aurora.core.config.loader import app_config_path
from aurora.core.models.runtime import RUNTIME_ENV_KEY
from aurora.core.models.settings import Settings

DEFAULT_BIN = Path("bin") / "server"


@dataclass
class CommandContext:
    """Shared state and helpers for sub-commands."""

    settings: Settings
    working_dir: Path
    hostname: str = ""
    env: str = ""
    bin_relpath: Path = field(default=DEFAULT_BIN)

    @classmethod
    def create(cls, settings: Settings, working_dir: Path | None = None) -> CommandContext:
        """Build the context for the current process."""
        return cls(
            settings=settings,
            working_dir=(working_dir or Path.cwd()).resolve(),
            hostname=socket.gethostname(),
            env=os.environ.get(RUNTIME_ENV_KEY, ""),
        )

    @property
    def main_path(self) -> Path:
        """The project's entry-point file."""
        return self.working_dir / self.settings.template.entry_file

    @property
    def bin_path(self) -> Path:
        """Default output location for the compiled server."""
        return self.working_dir / self.bin_relpath

    def has_bin(self) -> bool:
        return self.bin_path.is_file()

    def in_project_path(self) -> bool:
        """Whether the working directory looks like a project root."""
        return self.main_path.is_file()

    def file_path_to_abs(self, path: str | Path) -> Path | None:
        """Absolute form of ``path`` (relative to the working dir), or None if missing."""
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.working_dir / candidate
        candidate = Path(os.path.normpath(candidate))
        return candidate if candidate.exists() else None

    def config_file_for(self, env: str) -> Path:
        """The application config file for ``env``."""
        return app_config_path(self.working_dir, env)
