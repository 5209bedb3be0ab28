"""API models for POST /verify.

Request fields are deliberately loose: presence and shape are checked by
the reader so that a missing field yields the reader's 400, not a
framework 422.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifyRequest(BaseModel):
    """Verification request body."""

    model_config = ConfigDict(populate_by_name=True)

    address: Any = None
    proof_type: Any = Field(default=None, alias="proofType")


class VerifyResponse(BaseModel):
    """Verification result.

    Attributes:
        address: Address as submitted.
        proof_type: Proof type as submitted.
        has_proof: Contract's revocation-aware answer.
        verified: Same value as has_proof.
    """

    model_config = ConfigDict(populate_by_name=True)

    address: str
    proof_type: str = Field(alias="proofType")
    has_proof: bool = Field(alias="hasProof")
    verified: bool
