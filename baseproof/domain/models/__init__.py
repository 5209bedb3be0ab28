"""Domain models for BaseProof.

Value objects only; immutable and free of infrastructure dependencies.
"""

from baseproof.domain.models.proof import HolderSet, Proof, VerificationResult
from baseproof.domain.models.proof_definition import ProofDefinition
from baseproof.domain.models.proof_type import (
    HASH_LENGTH,
    ProofType,
    UnknownProofType,
    hash_to_hex,
)

__all__: list[str] = [
    "HASH_LENGTH",
    "HolderSet",
    "Proof",
    "ProofDefinition",
    "ProofType",
    "UnknownProofType",
    "VerificationResult",
    "hash_to_hex",
]
