"""API routes."""

from baseproof.api.routes.health import router as health_router
from baseproof.api.routes.proofs import router as proofs_router
from baseproof.api.routes.stats import router as stats_router
from baseproof.api.routes.verify import router as verify_router

__all__: list[str] = ["health_router", "proofs_router", "stats_router", "verify_router"]
