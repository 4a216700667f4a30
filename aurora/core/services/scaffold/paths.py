"""
Path resolution for new projects.

Turns a raw ``(name, working_dir)`` pair from the CLI into the absolute
directory the project will be created in.  Best effort: when the home
directory or the CWD cannot be determined, resolution carries on with
the raw input and the result is flagged as degraded.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass
from pathlib import Path

from aurora.core.services.scaffold.errors import PathResolutionDegraded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedProject:
    """Canonical ``(name, parent)`` split of the project location."""

    name: str
    parent: str
    degraded: bool = False

    @property
    def target(self) -> Path:
        return Path(self.parent) / self.name


def _degrade(reason: str) -> None:
    logger.debug("Path resolution degraded: %s", reason)
    warnings.warn(reason, PathResolutionDegraded, stacklevel=3)


def _expand_home(name: str) -> str:
    """Expand a leading ``~`` / ``~/`` against the user's home directory."""
    home = str(Path.home())
    rest = name[1:].lstrip("/\\")
    return os.path.join(home, rest) if rest else home


def _fallback_base(working_dir: str) -> str | None:
    """Anchor a relative ``working_dir`` without consulting the CWD.

    Tries the shell's ``$PWD``, then the home directory.
    """
    candidates = [os.environ.get("PWD")]
    try:
        candidates.append(str(Path.home()))
    except (RuntimeError, KeyError, OSError):
        pass
    for anchor in candidates:
        if anchor and os.path.isabs(anchor):
            return os.path.join(anchor, working_dir)
    return None


def resolve_project_params(name: str, working_dir: str = "") -> ResolvedProject:
    """Resolve a project name and optional parent directory.

    ``name`` may itself be a path: ``~/code/app`` expands against the home
    directory and an absolute name ignores ``working_dir``.  A relative
    ``working_dir`` (including empty) resolves against the CWD.

    The returned ``parent / name`` is path-equal to the resolved location.

    Degraded cases still yield a usable split: without a home directory
    the ``~`` is kept as a literal path segment, and without a CWD a
    relative ``working_dir`` is anchored at ``$PWD`` or the home
    directory.
    """
    degraded = False

    project = name
    if name.startswith("~"):
        try:
            project = _expand_home(name)
        except (RuntimeError, KeyError, OSError) as e:
            _degrade(f"cannot determine home directory, using {name!r} as given: {e}")
            degraded = True

    base = working_dir
    if not os.path.isabs(project) and not os.path.isabs(base):
        try:
            base = os.path.abspath(base or os.curdir)
        except OSError as e:
            _degrade(f"cannot resolve {working_dir!r} against the current directory: {e}")
            degraded = True
            base = _fallback_base(working_dir) or base

    full = os.path.normpath(os.path.join(base, project))
    return ResolvedProject(
        name=os.path.basename(full),
        parent=os.path.dirname(full),
        degraded=degraded,
    )
