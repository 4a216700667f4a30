"""
Runtime environment of a generated application.
"""

from __future__ import annotations

from enum import Enum

# Process environment variable that selects the runtime environment
RUNTIME_ENV_KEY = "RUNTIME_ENV"


class Env(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PRE = "pre"
    PROD = "prod"

    @classmethod
    def values(cls) -> list[str]:
        return [e.value for e in cls]

    @classmethod
    def parse(cls, value: str | None, default: "Env | None" = None) -> "Env":
        """Parse an environment name, falling back to ``default`` when empty.

        Raises:
            ValueError: If the name is not a supported environment.
        """
        if not value:
            if default is None:
                raise ValueError("runtime environment is not set")
            return default
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported runtime environment '{value}'. "
                f"Valid: {', '.join(cls.values())}"
            ) from None
