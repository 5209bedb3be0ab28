"""API request/response models."""

from baseproof.api.models.health import HealthResponse
from baseproof.api.models.proofs import (
    AddressProofsResponse,
    ProofHoldersResponse,
    ProofResponse,
)
from baseproof.api.models.stats import StatsResponse
from baseproof.api.models.verify import VerifyRequest, VerifyResponse

__all__: list[str] = [
    "AddressProofsResponse",
    "HealthResponse",
    "ProofHoldersResponse",
    "ProofResponse",
    "StatsResponse",
    "VerifyRequest",
    "VerifyResponse",
]
