"""Bootstrap wiring: logging setup and reader construction."""

from baseproof.bootstrap.logging import configure_logging
from baseproof.bootstrap.reader import build_registry, build_reader

__all__: list[str] = ["build_reader", "build_registry", "configure_logging"]
