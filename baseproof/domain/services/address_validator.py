"""Address validation and normalization.

Addresses are compared in lowercase everywhere inside the reader so
that set equality does not depend on checksum casing.
"""

from eth_utils import is_address

from baseproof.domain.errors.validation import ProofValidationError


def normalize_address(value: object, field: str = "address") -> str:
    """Validate an address and return it in lowercase form.

    Args:
        value: Candidate address (hex string, 0x-prefixed).
        field: Input name for error reporting.

    Returns:
        Lowercase 0x-prefixed address.

    Raises:
        ProofValidationError: If missing or not a valid address.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ProofValidationError(field, f"{field} is required", value)
    if not isinstance(value, str) or not is_address(value):
        raise ProofValidationError(field, f"{field} is not a valid address: {value!r}", value)
    return value.lower()
