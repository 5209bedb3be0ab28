"""BaseProof SDK client.

In-process access to the ProofRegistry for third-party Python code. The
client is a thin facade over ProofRegistryReader: same batching, cache,
deduplication and revocation filtering as the HTTP API.

Example:
    async with BaseProof("0x...", chain_id=84532) as client:
        if await client.has_proof(address, "BASE_CONTRACT_DEPLOYER"):
            ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from baseproof.application.ports.proof_registry_contract import ProofRegistryContractPort
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.config.reader_config import (
    SEPOLIA_CHAIN_ID,
    NetworkConfig,
    ReaderConfig,
)
from baseproof.domain.models.proof import HolderSet, Proof, VerificationResult
from baseproof.domain.models.proof_type import ProofType, UnknownProofType
from baseproof.domain.services.proof_type_registry import ProofTypeRegistry, canonical_hash
from baseproof.infrastructure.adapters.web3_proof_registry import Web3ProofRegistry


@dataclass(frozen=True)
class BaseProofConfig:
    """SDK construction parameters.

    Attributes:
        proof_registry_address: Deployed ProofRegistry address.
        rpc_url: RPC endpoint, the chain's public endpoint by default.
        chain_id: 84532 (Base Sepolia, default) or 8453 (Base).
    """

    proof_registry_address: str
    rpc_url: str | None = None
    chain_id: int = SEPOLIA_CHAIN_ID


class BaseProof:
    """ProofRegistry client.

    Args:
        proof_registry_address: Deployed ProofRegistry address. An empty
            address yields a client whose every read raises
            NotConfiguredError.
        rpc_url: RPC endpoint override.
        chain_id: 84532 or 8453; anything else raises ValueError.
        proof_types: Names to register up front for reverse lookup.
        contract: Contract port to use instead of the web3 adapter.
        **reader_options: Extra ReaderConfig fields (cache_ttl_seconds,
            stale_policy, ...).
    """

    def __init__(
        self,
        proof_registry_address: str,
        rpc_url: str | None = None,
        chain_id: int = SEPOLIA_CHAIN_ID,
        *,
        proof_types: Iterable[str] = (),
        contract: ProofRegistryContractPort | None = None,
        **reader_options: Any,
    ) -> None:
        config = ReaderConfig(
            network=NetworkConfig.for_chain_id(chain_id),
            rpc_url=rpc_url or "",
            proof_registry_address=proof_registry_address or "",
            definitions_path=None,
            **reader_options,
        )
        if contract is None and config.is_configured:
            contract = Web3ProofRegistry.from_config(config)
        self._reader = ProofRegistryReader(
            contract, config, registry=ProofTypeRegistry(proof_types)
        )

    @classmethod
    def from_reader(cls, reader: ProofRegistryReader) -> BaseProof:
        """Wrap an existing reader (shares its cache and registry)."""
        client = cls.__new__(cls)
        client._reader = reader
        return client

    async def __aenter__(self) -> BaseProof:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def reader(self) -> ProofRegistryReader:
        return self._reader

    @property
    def chain_id(self) -> int:
        return self._reader.config.network.chain_id

    @property
    def proof_registry_address(self) -> str:
        return self._reader.config.proof_registry_address

    # Proof types

    def register_proof_type(self, name: str) -> ProofType:
        """Make a type name known so its hash reverse-maps to it."""
        return self._reader.registry.register(name)

    def lookup_proof_type(self, proof_type_hash: bytes | str) -> ProofType | UnknownProofType:
        return self._reader.registry.reverse_lookup(proof_type_hash)

    @staticmethod
    def hash_proof_type(name: str) -> str:
        """0x-prefixed keccak-256 hash of a proof type name."""
        return "0x" + canonical_hash(name).hex()

    # Reads

    async def has_proof(self, address: str, proof_type: str) -> bool:
        return await self._reader.has_proof(address, proof_type)

    async def get_proofs(self, address: str) -> list[Proof]:
        """Live proofs of address (revoked records removed)."""
        return await self._reader.get_proofs(address)

    async def get_proof_records(self, address: str) -> list[Proof]:
        return await self._reader.get_proof_records(address)

    async def get_proofs_by_type(self, address: str, proof_type: str) -> list[int]:
        return await self._reader.get_proofs_by_type(address, proof_type)

    async def get_proof_type_holders(self, proof_type: str, live_only: bool = False) -> list[str]:
        return await self._reader.get_proof_type_holders(proof_type, live_only=live_only)

    async def get_holder_set(self, proof_type: str, live_only: bool = False) -> HolderSet:
        return await self._reader.get_holder_set(proof_type, live_only=live_only)

    async def get_total_proofs(self) -> int:
        return await self._reader.get_total_proofs()

    async def verify(self, address: str, proof_type: str) -> VerificationResult:
        return await self._reader.verify(address, proof_type)

    async def get_block_number(self) -> int:
        return await self._reader.get_block_number()

    # Lifecycle

    def invalidate(self, address: str | None = None) -> int:
        """Drop cached reads, all of them or those for one address."""
        return self._reader.invalidate(address)

    async def close(self) -> None:
        await self._reader.close()


def create_base_proof(config: BaseProofConfig, **kwargs: Any) -> BaseProof:
    """Build a client from a BaseProofConfig."""
    return BaseProof(
        config.proof_registry_address,
        rpc_url=config.rpc_url,
        chain_id=config.chain_id,
        **kwargs,
    )
