"""ProofRegistry contract port.

This module defines the abstract interface to the deployed ProofRegistry
contract. The reader depends only on this protocol; the web3 adapter
implements it against a live RPC endpoint and the in-memory stub
implements it for tests.

Contract ABI (view functions):
- getProofs(address subject) -> uint256[]
- getProof(uint256 proofId) -> (bytes32, address, bytes32, uint256, address, bool)
- hasProof(address subject, bytes32 proofType) -> bool
- getProofsByType(address subject, bytes32 proofType) -> uint256[]
- getProofTypeHolders(bytes32 proofType) -> address[]
- totalProofs() -> uint256

Developer Golden Rules:
1. RAW VALUES ONLY - implementations return chain values, no filtering
2. NO CACHING - caching belongs to the reader
3. TYPED FAILURES - surface RpcFailureError / RpcTimeoutError, never raw client errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ProofRecord:
    """One getProof() tuple as returned by the contract.

    Attributes:
        proof_type_hash: bytes32 proof type.
        subject: Subject address (any casing).
        metadata_hash: bytes32 metadata hash.
        timestamp: Issuance time, unix seconds.
        issuer: Issuer address (any casing).
        revoked: Revocation flag.
    """

    proof_type_hash: bytes
    subject: str
    metadata_hash: bytes
    timestamp: int
    issuer: str
    revoked: bool


@runtime_checkable
class ProofRegistryContractPort(Protocol):
    """Protocol for read-only access to the ProofRegistry contract.

    Usage:
        ids = await contract.get_proof_ids(subject)
        records = [await contract.get_proof(i) for i in ids]
    """

    async def get_proof_ids(self, subject: str) -> list[int]:
        """Return the subject's proof ids in on-chain insertion order."""
        ...

    async def get_proof(self, proof_id: int) -> ProofRecord:
        """Return one proof record."""
        ...

    async def has_proof(self, subject: str, proof_type_hash: bytes) -> bool:
        """Return the contract's hasProof answer (revocation-aware)."""
        ...

    async def get_proofs_by_type(self, subject: str, proof_type_hash: bytes) -> list[int]:
        """Return the subject's proof ids of one type."""
        ...

    async def get_proof_type_holders(self, proof_type_hash: bytes) -> list[str]:
        """Return every address recorded as holding the type."""
        ...

    async def total_proofs(self) -> int:
        """Return the issuance counter."""
        ...

    async def block_number(self) -> int:
        """Return the current head block number."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
