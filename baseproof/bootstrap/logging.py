"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

import structlog

from baseproof.infrastructure.observability import configure_structlog

ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"


def configure_logging(environment: str | None = None, log_level: str | None = None) -> str:
    """Configure structlog from ENVIRONMENT (production -> JSON lines).

    Returns:
        The environment name that was applied.
    """
    environment = environment or os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
    configure_structlog(environment=environment, log_level=log_level)
    structlog.get_logger().bind(component="startup_logging").debug(
        "structured_logging_configured", environment=environment
    )
    return environment


__all__ = ["configure_logging"]
