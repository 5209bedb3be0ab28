"""Domain services: pure functions and in-memory tables."""

from baseproof.domain.services.address_validator import normalize_address
from baseproof.domain.services.proof_type_registry import (
    ProofTypeRegistry,
    canonical_hash,
    looks_like_hash,
    parse_hash,
)

__all__: list[str] = [
    "ProofTypeRegistry",
    "canonical_hash",
    "looks_like_hash",
    "normalize_address",
    "parse_hash",
]
