"""Application ports (interfaces implemented by infrastructure)."""

from baseproof.application.ports.proof_registry_contract import (
    ProofRecord,
    ProofRegistryContractPort,
)

__all__: list[str] = ["ProofRecord", "ProofRegistryContractPort"]
