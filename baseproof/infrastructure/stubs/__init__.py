"""Infrastructure stubs for development and testing.

Available stubs:
- ProofRegistryContractStub: In-memory ProofRegistry with call counting,
  latency injection and failure injection

WARNING: These stubs are NOT for production use.
Production implementations are in baseproof/infrastructure/adapters/.
"""

from baseproof.infrastructure.stubs.proof_registry_contract_stub import (
    DEFAULT_ISSUER,
    ProofRegistryContractStub,
)

__all__: list[str] = ["DEFAULT_ISSUER", "ProofRegistryContractStub"]
