"""In-memory ProofRegistry contract for development and testing.

Mirrors the contract's view semantics:
- getProofs returns ids in issuance order, revoked ones included
- hasProof is revocation-aware
- getProofTypeHolders is append-only (revocation does not remove a holder)
- totalProofs counts every issuance

Test hooks:
- calls: per-operation call counter (contract ABI names)
- delay_seconds: latency injected before every call
- fail_with(operation, exc): make one operation raise
- set_total_proofs(): simulate a lagging node reporting a lower counter

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import replace

from baseproof.application.ports.proof_registry_contract import (
    ProofRecord,
    ProofRegistryContractPort,
)
from baseproof.domain.services.proof_type_registry import canonical_hash

DEFAULT_ISSUER = "0x00000000000000000000000000000000000155e4"
ZERO_HASH = bytes(32)


class ProofRegistryContractStub(ProofRegistryContractPort):
    """In-memory stand-in for the deployed contract.

    Attributes:
        calls: Counter of calls per operation name.
        delay_seconds: Sleep before answering each call.
        closed: True once close() has been awaited.
    """

    def __init__(self, delay_seconds: float = 0.0, block_number: int = 1) -> None:
        self._proofs: dict[int, ProofRecord] = {}
        self._by_subject: dict[str, list[int]] = {}
        self._holders: dict[bytes, list[str]] = {}
        self._failures: dict[str, BaseException] = {}
        self._next_id = 1
        self._total_override: int | None = None
        self._block_number = block_number
        self.calls: Counter[str] = Counter()
        self.delay_seconds = delay_seconds
        self.closed = False

    # =========================================================================
    # Setup helpers
    # =========================================================================

    def issue(
        self,
        subject: str,
        proof_type: str | bytes,
        revoked: bool = False,
        issuer: str = DEFAULT_ISSUER,
        metadata_hash: bytes = ZERO_HASH,
        timestamp: int = 1_700_000_000,
    ) -> int:
        """Issue a proof and return its id.

        Args:
            subject: Subject address.
            proof_type: Type name (hashed with canonical_hash) or raw bytes32.
            revoked: Issue already revoked.
            issuer: Issuer address.
            metadata_hash: bytes32 metadata hash.
            timestamp: Issuance timestamp.
        """
        type_hash = canonical_hash(proof_type) if isinstance(proof_type, str) else proof_type
        proof_id = self._next_id
        self._next_id += 1

        self._proofs[proof_id] = ProofRecord(
            proof_type_hash=type_hash,
            subject=subject,
            metadata_hash=metadata_hash,
            timestamp=timestamp,
            issuer=issuer,
            revoked=revoked,
        )
        self._by_subject.setdefault(subject.lower(), []).append(proof_id)
        self._holders.setdefault(type_hash, []).append(subject)
        return proof_id

    def revoke(self, proof_id: int) -> None:
        """Flip a proof's revoked flag (one-way)."""
        self._proofs[proof_id] = replace(self._proofs[proof_id], revoked=True)

    def fail_with(self, operation: str, exc: BaseException | None) -> None:
        """Make operation raise exc on every call (None clears it)."""
        if exc is None:
            self._failures.pop(operation, None)
        else:
            self._failures[operation] = exc

    def set_total_proofs(self, value: int | None) -> None:
        """Override the issuance counter (None restores the real count)."""
        self._total_override = value

    def set_block_number(self, value: int) -> None:
        self._block_number = value

    # =========================================================================
    # ProofRegistryContractPort
    # =========================================================================

    async def get_proof_ids(self, subject: str) -> list[int]:
        await self._enter("getProofs")
        return list(self._by_subject.get(subject.lower(), []))

    async def get_proof(self, proof_id: int) -> ProofRecord:
        await self._enter("getProof")
        record = self._proofs.get(proof_id)
        if record is None:
            raise ValueError(f"execution reverted: proof {proof_id} does not exist")
        return record

    async def has_proof(self, subject: str, proof_type_hash: bytes) -> bool:
        await self._enter("hasProof")
        return any(
            not self._proofs[proof_id].revoked
            and self._proofs[proof_id].proof_type_hash == proof_type_hash
            for proof_id in self._by_subject.get(subject.lower(), [])
        )

    async def get_proofs_by_type(self, subject: str, proof_type_hash: bytes) -> list[int]:
        await self._enter("getProofsByType")
        return [
            proof_id
            for proof_id in self._by_subject.get(subject.lower(), [])
            if self._proofs[proof_id].proof_type_hash == proof_type_hash
        ]

    async def get_proof_type_holders(self, proof_type_hash: bytes) -> list[str]:
        await self._enter("getProofTypeHolders")
        return list(self._holders.get(proof_type_hash, []))

    async def total_proofs(self) -> int:
        await self._enter("totalProofs")
        if self._total_override is not None:
            return self._total_override
        return len(self._proofs)

    async def block_number(self) -> int:
        await self._enter("blockNumber")
        return self._block_number

    async def close(self) -> None:
        self.closed = True

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        failure = self._failures.get(operation)
        if failure is not None:
            raise failure
