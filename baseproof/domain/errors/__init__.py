"""Domain errors for BaseProof.

All exceptions inherit from BaseProofError.
"""

from baseproof.domain.errors.registry import NotConfiguredError
from baseproof.domain.errors.rpc import RpcFailureError, RpcTimeoutError
from baseproof.domain.errors.validation import MalformedHashError, ProofValidationError

__all__: list[str] = [
    "MalformedHashError",
    "NotConfiguredError",
    "ProofValidationError",
    "RpcFailureError",
    "RpcTimeoutError",
]
