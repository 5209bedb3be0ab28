"""Registry statistics route."""

from fastapi import APIRouter, Depends, Request

from baseproof.api.dependencies.reader import get_proof_registry_reader
from baseproof.api.errors import to_http_exception
from baseproof.api.models.stats import StatsResponse
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.application.services.read_cache import read_was_stale

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    request: Request,
    reader: ProofRegistryReader = Depends(get_proof_registry_reader),
) -> StatsResponse:
    """Return the issuance counter and the network the reader targets.

    totalProofs is a decimal string; it never decreases for the lifetime
    of the process.
    """
    try:
        total = await reader.get_total_proofs()
    except Exception as exc:
        raise to_http_exception(exc, request) from None

    return StatsResponse(
        total_proofs=str(total),
        network=reader.config.network.name,
        contract_address=reader.config.proof_registry_address,
        stale=read_was_stale(),
    )
