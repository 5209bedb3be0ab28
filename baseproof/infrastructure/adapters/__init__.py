"""Production adapters for application ports."""

from baseproof.infrastructure.adapters.definitions_loader import (
    DefinitionsError,
    load_proof_definitions,
    parse_proof_definitions,
)
from baseproof.infrastructure.adapters.web3_proof_registry import (
    PROOF_REGISTRY_ABI,
    Web3ProofRegistry,
)

__all__: list[str] = [
    "DefinitionsError",
    "PROOF_REGISTRY_ABI",
    "Web3ProofRegistry",
    "load_proof_definitions",
    "parse_proof_definitions",
]
