"""
Application config models — the parts of a generated project's
``configs/config.<env>.yaml`` that aurora reads.

Only the ``data:`` section matters here: every entry under it that
declares a ``driver`` is a database connection.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DBDriver(str, Enum):
    MYSQL = "mysql"


class DBResolver(BaseModel):
    """A read replica / source entry under a connection."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = "replica"
    addr: str = ""
    database: str = ""
    username: str = ""
    password: str = ""
    options: str = ""


class DBConnection(BaseModel):
    """A database connection declared in the application config."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = ""
    driver: str
    addr: str = ""
    database: str = ""
    username: str = ""
    password: str = ""
    options: str = ""
    max_idle_conn: int = Field(default=0, alias="maxIdleConn")
    max_open_conn: int = Field(default=0, alias="maxOpenConn")
    log_info: bool = Field(default=False, alias="logInfo")
    resolvers: list[DBResolver] = Field(default_factory=list)

    @property
    def supported(self) -> bool:
        return self.driver in {d.value for d in DBDriver}

    @property
    def label(self) -> str:
        """Human-readable ``[driver: database]`` label used in prompts."""
        return f"[{self.driver}: {self.database}]"

    def host_port(self) -> tuple[str, int | None]:
        """Split ``addr`` into host and optional port."""
        host, sep, port = self.addr.rpartition(":")
        if not sep:
            return self.addr, None
        try:
            return host, int(port)
        except ValueError:
            return self.addr, None


class AppConfig(BaseModel):
    """The subset of the application config aurora understands."""

    model_config = ConfigDict(extra="ignore")

    env: str = ""
    connections: list[DBConnection] = Field(default_factory=list)

    def get_connection(self, key: str) -> DBConnection | None:
        """Look up a connection by its key under ``data:``."""
        for conn in self.connections:
            if conn.key == key:
                return conn
        return None
