"""BaseProof SDK.

Example:
    from baseproof.sdk import BaseProof

    async with BaseProof("0x...") as client:
        proofs = await client.get_proofs("0x...")
"""

from baseproof.sdk.client import BaseProof, BaseProofConfig, create_base_proof

__all__: list[str] = ["BaseProof", "BaseProofConfig", "create_base_proof"]
