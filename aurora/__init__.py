"""Aurora — project scaffolding and orchestration CLI."""

__version__ = "0.1.0"
