"""Proof lookup routes.

GET /address/{address}/proofs   live proofs of an address
GET /proof/{proof_type}/holders addresses holding a proof type

Developer Golden Rules:
1. READER ONLY - no route talks to the chain client directly
2. REVOKED IS NOT LIVE - proofs lists never include revoked records
3. STALE IS VISIBLE - every payload reports whether a cache fallback was used
"""

from fastapi import APIRouter, Depends, Query, Request

from baseproof.api.dependencies.reader import get_proof_registry_reader
from baseproof.api.errors import to_http_exception
from baseproof.api.models.proofs import (
    AddressProofsResponse,
    ProofHoldersResponse,
    ProofResponse,
)
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.application.services.read_cache import read_was_stale

router = APIRouter(tags=["proofs"])


@router.get(
    "/address/{address}/proofs",
    response_model=AddressProofsResponse,
    summary="List the live proofs of an address",
)
async def get_address_proofs(
    address: str,
    request: Request,
    reader: ProofRegistryReader = Depends(get_proof_registry_reader),
) -> AddressProofsResponse:
    """Return non-revoked proofs plus the total number of records.

    Raises:
        HTTPException 400: Malformed address
        HTTPException 503: Registry not configured
        HTTPException 500: Upstream failure or timeout
    """
    try:
        records = await reader.get_proof_records(address)
    except Exception as exc:
        raise to_http_exception(exc, request) from None

    return AddressProofsResponse(
        address=address,
        proofs=[ProofResponse.from_proof(proof) for proof in records if proof.is_live],
        total=len(records),
        stale=read_was_stale(),
    )


@router.get(
    "/proof/{proof_type}/holders",
    response_model=ProofHoldersResponse,
    summary="List holders of a proof type",
)
async def get_proof_holders(
    proof_type: str,
    request: Request,
    live_only: bool = Query(default=False, alias="liveOnly"),
    reader: ProofRegistryReader = Depends(get_proof_registry_reader),
) -> ProofHoldersResponse:
    """Return holders of a proof type given by name or 0x bytes32 hash.

    With liveOnly=true each holder is re-checked with hasProof and those
    whose proofs are all revoked are dropped.
    """
    try:
        holders = await reader.get_proof_type_holders(proof_type, live_only=live_only)
    except Exception as exc:
        raise to_http_exception(exc, request) from None

    return ProofHoldersResponse(
        proof_type=proof_type,
        holders=holders,
        count=len(holders),
        stale=read_was_stale(),
    )
