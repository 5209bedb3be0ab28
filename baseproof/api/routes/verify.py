"""Verification route."""

from fastapi import APIRouter, Depends, Request

from baseproof.api.dependencies.reader import get_proof_registry_reader
from baseproof.api.errors import to_http_exception
from baseproof.api.models.verify import VerifyRequest, VerifyResponse
from baseproof.application.services.proof_registry_reader import ProofRegistryReader

router = APIRouter(tags=["verify"])


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"description": "address or proofType missing or malformed"},
        503: {"description": "ProofRegistry not configured"},
    },
)
async def verify_proof(
    body: VerifyRequest,
    request: Request,
    reader: ProofRegistryReader = Depends(get_proof_registry_reader),
) -> VerifyResponse:
    """Check whether an address holds a live proof of a type.

    Input is validated before the configuration check, so a malformed
    request is a 400 even on an unconfigured server.
    """
    try:
        result = await reader.verify(body.address, body.proof_type)
    except Exception as exc:
        raise to_http_exception(exc, request) from None

    return VerifyResponse(
        address=result.address,
        proof_type=result.proof_type,
        has_proof=result.has_proof,
        verified=result.has_proof,
    )
