"""API models for proof lookups.

Wire names are camelCase; integers that can exceed 2**53 (proof ids,
timestamps) are strings.
"""

from pydantic import BaseModel, ConfigDict, Field

from baseproof.domain.models.proof import Proof


class ProofResponse(BaseModel):
    """One proof record.

    Attributes:
        id: On-chain proof id (decimal string).
        proof_type: Type name, or "Unknown(0x..)" when the hash has no
            registered name.
        proof_type_hash: 0x-prefixed bytes32 type hash.
        known_type: False when proof_type is an Unknown(...) label.
        subject: Lowercase subject address.
        metadata_hash: 0x-prefixed bytes32 metadata hash.
        timestamp: Issuance time in unix seconds (decimal string).
        issuer: Lowercase issuer address.
        revoked: Revocation flag.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    proof_type: str = Field(alias="proofType")
    proof_type_hash: str = Field(alias="proofTypeHash")
    known_type: bool = Field(alias="knownType")
    subject: str
    metadata_hash: str = Field(alias="metadataHash")
    timestamp: str
    issuer: str
    revoked: bool

    @classmethod
    def from_proof(cls, proof: Proof) -> "ProofResponse":
        return cls.model_validate(proof.to_dict())


class AddressProofsResponse(BaseModel):
    """Live proofs of one address.

    Attributes:
        address: Address as requested.
        proofs: Non-revoked proofs in on-chain order.
        total: Number of records on-chain for the address, revoked included.
        stale: True if the answer came from an expired cache entry.
    """

    address: str
    proofs: list[ProofResponse]
    total: int
    stale: bool = False


class ProofHoldersResponse(BaseModel):
    """Holders of one proof type."""

    model_config = ConfigDict(populate_by_name=True)

    proof_type: str = Field(alias="proofType")
    holders: list[str]
    count: int
    stale: bool = False
