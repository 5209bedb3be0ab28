"""Proof records and derived views.

Proofs are owned by the chain. Once issued they change only through
the one-way revoked flag; the reader caches read-only snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from baseproof.domain.models.proof_type import ProofType, UnknownProofType, hash_to_hex


@dataclass(frozen=True)
class Proof:
    """Immutable snapshot of one ProofRegistry record.

    Attributes:
        id: On-chain proof id.
        proof_type: Resolved type, or UnknownProofType if the hash has no
            registered name.
        proof_type_hash: Raw 32-byte type hash as stored on-chain.
        subject: Address the proof is about (lowercase).
        metadata_hash: 32-byte hash of the off-chain metadata.
        timestamp: Issuance time (unix seconds).
        issuer: Issuing address (lowercase).
        revoked: True once the issuer has revoked the proof.
    """

    id: int
    proof_type: ProofType | UnknownProofType
    proof_type_hash: bytes
    subject: str
    metadata_hash: bytes
    timestamp: int
    issuer: str
    revoked: bool

    @property
    def is_live(self) -> bool:
        return not self.revoked

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON transports.

        Integers that may exceed 2**53 (id, timestamp) are rendered as
        strings so JavaScript consumers do not lose precision.
        """
        return {
            "id": str(self.id),
            "proofType": self.proof_type.label,
            "proofTypeHash": hash_to_hex(self.proof_type_hash),
            "knownType": isinstance(self.proof_type, ProofType),
            "subject": self.subject,
            "metadataHash": hash_to_hex(self.metadata_hash),
            "timestamp": str(self.timestamp),
            "issuer": self.issuer,
            "revoked": self.revoked,
        }


@dataclass(frozen=True)
class HolderSet:
    """Subjects holding a proof of one type.

    Attributes:
        proof_type: The type the set was queried for.
        holders: Lowercase addresses, deduplicated, in first-seen order.
        live_only: True when holders were re-checked for revocation.
    """

    proof_type: ProofType | UnknownProofType
    holders: tuple[str, ...]
    live_only: bool = False

    def __len__(self) -> int:
        return len(self.holders)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self.holders


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of verify(address, proof_type)."""

    address: str
    proof_type: str
    has_proof: bool
