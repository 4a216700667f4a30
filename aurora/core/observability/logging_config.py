"""
Diagnostic logging for aurora.

User-facing output goes through ``click.secho`` in the commands; logging
is the diagnostic channel underneath it.  Records are echoed to stderr
through click, so they interleave with command output and pick up the
same colour handling.  Creation runs on a worker thread, so detailed
records carry the thread name.
"""

from __future__ import annotations

import logging

import click

_FMT_DETAILED = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"

_LEVEL_COLORS = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ClickEchoHandler(logging.Handler):
    """Echo records to stderr via click, coloured by level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            click.secho(message, err=True, fg=_LEVEL_COLORS.get(record.levelno))
        except Exception:
            self.handleError(record)


def parse_level(level: str | None) -> int:
    """Level name to its numeric value; WARNING for anything unknown."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure the root logger for one CLI invocation.

    At WARNING and above only the message is shown.  INFO and DEBUG add
    time, level, thread and logger name.  ``log_file`` additionally
    records everything at DEBUG.  SQLAlchemy is kept at WARNING unless
    ``level`` is DEBUG, since it logs every statement at INFO.
    """
    numeric_level = parse_level(level)

    console = ClickEchoHandler()
    console.setLevel(numeric_level)
    if numeric_level <= logging.INFO:
        console.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT))
    else:
        console.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT))
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)

    logging.getLogger("sqlalchemy").setLevel(
        logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    )
