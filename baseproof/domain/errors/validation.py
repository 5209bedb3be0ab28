"""Input validation errors.

Raised before any network call is made, so callers get a structured
error instead of an opaque failure from the chain client.
"""

from baseproof.domain.exceptions import BaseProofError


class ProofValidationError(BaseProofError, ValueError):
    """Raised when a required input is missing or malformed.

    Maps to HTTP 400.

    Attributes:
        field: Name of the offending input.
        value: The value that failed validation (None when missing).
    """

    def __init__(self, field: str, message: str, value: object = None) -> None:
        """Initialize validation error.

        Args:
            field: Name of the offending input.
            message: Human-readable description.
            value: Rejected value, if any.
        """
        self.field = field
        self.value = value
        super().__init__(message)


class MalformedHashError(ProofValidationError):
    """Raised when a proof type hash is not exactly 32 bytes.

    Distinct from an unregistered hash: an unregistered but well-formed
    hash is a representable value (UnknownProofType), a malformed one
    is an error.

    Attributes:
        length: Byte length that was received, or None if not decodable.
    """

    def __init__(self, value: object, length: int | None = None) -> None:
        """Initialize malformed hash error.

        Args:
            value: The rejected hash value.
            length: Decoded byte length, if the value was decodable.
        """
        self.length = length
        if length is None:
            message = f"Proof type hash is not valid hex: {value!r}"
        else:
            message = f"Proof type hash must be 32 bytes, got {length}"
        super().__init__("proofType", message, value)
