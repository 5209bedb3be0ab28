"""Configuration errors for the ProofRegistry reader.

A reader without a contract address must refuse every lookup up
front. Issuing a call against an empty address would either fail
opaquely at the RPC layer or, worse, read from the zero address.
"""

from baseproof.domain.exceptions import BaseProofError


class NotConfiguredError(BaseProofError):
    """Raised when the ProofRegistry contract address is not configured.

    Maps to HTTP 503: the service is up but cannot answer reads.

    Attributes:
        setting: Name of the missing setting.
    """

    def __init__(self, setting: str = "PROOF_REGISTRY_ADDRESS") -> None:
        """Initialize with the missing setting name.

        Args:
            setting: Environment variable or config field that is absent.
        """
        self.setting = setting
        super().__init__("ProofRegistry not configured")
