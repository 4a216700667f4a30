"""
Identifier rewriter — swaps the template's module identifier for the
project name in file contents.

Scope is closed: every regular file under the configured directories
(recursively) plus the entry-point file.  File and directory names are
never touched.  Substitution is a literal, global replace on the raw
bytes, so non-UTF-8 files pass through unharmed.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from aurora.core.models.project import RewriteTarget
from aurora.core.services.scaffold.errors import RewriteFailed

logger = logging.getLogger(__name__)


@dataclass
class RewriteReport:
    """Outcome of one rewrite pass."""

    files_scanned: int = 0
    files_changed: int = 0
    replacements: int = 0
    changed: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "files_scanned": self.files_scanned,
            "files_changed": self.files_changed,
            "replacements": self.replacements,
            "changed": [str(p) for p in self.changed],
        }


class IdentifierRewriter:
    """Literal find-and-replace of a module identifier across a project tree."""

    def __init__(
        self,
        old: str,
        new: str,
        *,
        dirs: Sequence[str] = (),
        entry_file: str = "main.go",
    ):
        if not old:
            raise ValueError("identifier to replace must not be empty")
        self.old = old
        self.new = new
        self.dirs = list(dirs)
        self.entry_file = entry_file
        self._old_bytes = old.encode("utf-8")
        self._new_bytes = new.encode("utf-8")

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Every file in scope: the entry file first, then each directory."""
        entry = root / self.entry_file
        if not entry.is_file():
            raise RewriteFailed(f"Entry file not found: {entry}", path=entry)
        yield entry

        for name in self.dirs:
            base = root / name
            if not base.is_dir():
                logger.debug("Skipping missing directory %s", base)
                continue

            def _raise(err: OSError) -> None:
                raise RewriteFailed(f"Cannot walk {err.filename}: {err}", path=base) from err

            for dirpath, dirnames, filenames in os.walk(base, onerror=_raise):
                dirnames.sort()
                for filename in sorted(filenames):
                    path = Path(dirpath) / filename
                    if path.is_symlink() or not path.is_file():
                        continue
                    yield path

    def load(self, path: Path) -> RewriteTarget:
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
            content = path.read_bytes()
        except OSError as e:
            raise RewriteFailed(f"Cannot read {path}: {e}", path=path) from e
        return RewriteTarget(path=path, content=content, mode=mode)

    def apply(self, target: RewriteTarget) -> int:
        """Rewrite one file in place; returns the number of replacements."""
        count = target.content.count(self._old_bytes)
        if count == 0:
            return 0
        updated = target.content.replace(self._old_bytes, self._new_bytes)
        try:
            target.path.write_bytes(updated)
            os.chmod(target.path, target.mode)
        except OSError as e:
            raise RewriteFailed(f"Cannot write {target.path}: {e}", path=target.path) from e
        logger.debug("Replaced %d reference(s) in %s", count, target.path)
        return count

    def rewrite(self, root: Path) -> RewriteReport:
        """Rewrite every file in scope under ``root``.

        Files already rewritten are left as they are if a later file fails;
        the caller is expected to discard the whole tree.

        Raises:
            RewriteFailed: On the first unreadable or unwritable file.
        """
        report = RewriteReport()
        for path in self.iter_files(root):
            report.files_scanned += 1
            count = self.apply(self.load(path))
            if count:
                report.files_changed += 1
                report.replacements += count
                report.changed.append(path)

        logger.info(
            "Rewrote %d reference(s) in %d/%d file(s) to '%s'",
            report.replacements, report.files_changed, report.files_scanned, self.new,
        )
        return report
