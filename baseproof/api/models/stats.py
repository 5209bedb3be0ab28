"""Registry statistics response model."""

from pydantic import BaseModel, ConfigDict, Field


class StatsResponse(BaseModel):
    """Registry-wide statistics.

    Attributes:
        total_proofs: Proofs ever issued, decimal string (uint256).
        network: Network display name ("Base Sepolia" or "Base").
        contract_address: Configured ProofRegistry address.
        stale: True if the counter came from an expired cache entry.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_proofs: str = Field(alias="totalProofs")
    network: str
    contract_address: str = Field(alias="contractAddress")
    stale: bool = False
