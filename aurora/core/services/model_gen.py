"""
ORM model generation — drives gentool against a project's database.

Flow (the CLI supplies the interactive choices):

    configs/config.<env>.yaml  →  pick a connection
                               →  pick tables (given, or SHOW TABLES)
                               →  gentool -dsn ... -tables ...

Only MySQL connections are supported.  Table introspection goes through
SQLAlchemy with the PyMySQL driver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError

from aurora.core.models.database import AppConfig, DBConnection, DBDriver
from aurora.core.services.go_ops import ToolError, ToolRunner, run_tool

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "./internal/repo/orm"
DEFAULT_PACKAGE_NAME = "orm"
DEFAULT_DB_CONN = "db"
MODEL_FILE = "model.go"

DSN_TEMPLATE = "{user}:{password}@tcp({addr})/{database}?charset=utf8mb4&parseTime=True&loc=Local"

_CONNECT_TIMEOUT = 10


class ModelGenError(Exception):
    """Raised when models cannot be generated."""


@dataclass
class ModelGenOptions:
    """What to generate and where."""

    tables: list[str]
    output_path: str = DEFAULT_OUTPUT_PATH
    package_name: str = DEFAULT_PACKAGE_NAME


def parse_tables(value: str | None) -> list[str]:
    """Split a comma-separated ``--table`` value, dropping blanks."""
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


# ── Connection choice ───────────────────────────────────────────


def choose_connection(
    app: AppConfig,
    key: str | None = None,
    chooser: Callable[[list[DBConnection]], DBConnection | None] | None = None,
) -> DBConnection:
    """Pick the connection to generate from.

    A lone connection is used as-is; otherwise ``key`` selects one by its
    name under ``data:``, and failing that ``chooser`` is asked.

    Raises:
        ModelGenError: No connections, no way to choose, or an
            unsupported driver.
    """
    if not app.connections:
        raise ModelGenError("No database connection configured in this project")

    if len(app.connections) == 1:
        conn = app.connections[0]
    else:
        conn = app.get_connection(key) if key else None
        if conn is None and chooser is not None:
            conn = chooser(list(app.connections))
        if conn is None:
            keys = ", ".join(c.key for c in app.connections)
            raise ModelGenError(
                f"Several connections configured ({keys}); choose one with --conn"
            )

    if not conn.supported:
        raise ModelGenError(
            f"Unsupported driver '{conn.driver}' for connection '{conn.key}' "
            f"(supported: {', '.join(d.value for d in DBDriver)})"
        )
    logger.info("Using connection %s %s", conn.key, conn.label)
    return conn


# ── Introspection ───────────────────────────────────────────────


def engine_url(conn: DBConnection) -> URL:
    """SQLAlchemy URL for a MySQL connection (PyMySQL driver)."""
    host, port = conn.host_port()
    return URL.create(
        "mysql+pymysql",
        username=conn.username or None,
        password=conn.password or None,
        host=host or None,
        port=port,
        database=conn.database or None,
        query={"charset": "utf8mb4"},
    )


def list_tables(conn: DBConnection) -> list[str]:
    """Every table of the connection's database (``SHOW TABLES``).

    Raises:
        ModelGenError: On connection or query failure, or if the
            database has no tables.
    """
    engine = create_engine(engine_url(conn), connect_args={"connect_timeout": _CONNECT_TIMEOUT})
    try:
        with engine.connect() as db:
            tables = [str(t) for t in db.execute(text("SHOW TABLES")).scalars().all()]
    except SQLAlchemyError as e:
        raise ModelGenError(f"Cannot list tables of {conn.label}: {e}") from e
    finally:
        engine.dispose()

    if not tables:
        raise ModelGenError(f"No tables found in {conn.label}")
    logger.debug("Found %d table(s) in %s", len(tables), conn.label)
    return tables


# ── gentool ─────────────────────────────────────────────────────


def build_dsn(conn: DBConnection) -> str:
    """The go-sql-driver DSN gentool expects."""
    return DSN_TEMPLATE.format(
        user=conn.username,
        password=conn.password,
        addr=conn.addr,
        database=conn.database,
    )


def gentool_args(
    conn: DBConnection,
    options: ModelGenOptions,
    *,
    gentool: str = "gentool",
) -> list[str]:
    return [
        gentool,
        "-dsn", build_dsn(conn),
        "-db", DBDriver.MYSQL.value,
        "-tables", ",".join(options.tables),
        "-modelPkgName", options.package_name,
        "-outPath", options.output_path,
        "-outFile", MODEL_FILE,
        "-onlyModel",
        "-fieldWithIndexTag",
        "-fieldWithTypeTag",
        "-fieldNullable",
    ]


def generate_models(
    conn: DBConnection,
    options: ModelGenOptions,
    *,
    cwd: Path,
    gentool: str = "gentool",
    timeout: float | None = None,
    runner: ToolRunner | None = None,
) -> None:
    """Run gentool for the chosen tables; output streams to the terminal.

    Raises:
        ModelGenError: If no tables were chosen or gentool fails.
    """
    if not options.tables:
        raise ModelGenError("No tables selected")

    logger.info(
        "Generating models for %d table(s) into %s (package %s)",
        len(options.tables), options.output_path, options.package_name,
    )
    runner = runner or run_tool
    try:
        runner(
            gentool_args(conn, options, gentool=gentool),
            cwd=cwd,
            timeout=timeout,
            capture=False,
        )
    except ToolError as e:
        raise ModelGenError(f"gentool failed: {e}") from e


def select_tables(
    available: Sequence[str],
    answer: str,
) -> list[str]:
    """Resolve a multi-select answer (indexes or names, comma separated).

    Raises:
        ModelGenError: On an unknown table or an out-of-range index.
    """
    chosen: list[str] = []
    for token in parse_tables(answer):
        if token.isdigit():
            index = int(token)
            if not 1 <= index <= len(available):
                raise ModelGenError(f"No table numbered {index}")
            name = available[index - 1]
        elif token in available:
            name = token
        else:
            raise ModelGenError(f"Unknown table: {token}")
        if name not in chosen:
            chosen.append(name)
    return chosen
