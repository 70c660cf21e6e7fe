"""Infrastructure helpers."""

from helm.infra.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
