"""Chain RPC errors.

The reader never retries on its own; retry with bounded backoff lives
in the transport adapter. Whatever escapes the adapter surfaces here.
"""

from baseproof.domain.exceptions import BaseProofError


class RpcTimeoutError(BaseProofError):
    """Raised when a contract read exceeds the configured timeout.

    Attributes:
        operation: Contract operation that timed out.
        timeout_seconds: Budget that was exceeded.
    """

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        """Initialize timeout error.

        Args:
            operation: Contract operation name (e.g. "getProofs").
            timeout_seconds: Configured timeout.
        """
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{operation} timed out after {timeout_seconds}s")


class RpcFailureError(BaseProofError):
    """Raised when the underlying RPC or contract call fails.

    The upstream message is passed through unchanged.

    Attributes:
        operation: Contract operation that failed.
    """

    def __init__(self, operation: str, message: str) -> None:
        """Initialize RPC failure.

        Args:
            operation: Contract operation name.
            message: Upstream error message.
        """
        self.operation = operation
        super().__init__(message)
