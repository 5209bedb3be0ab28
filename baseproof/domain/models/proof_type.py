"""Proof type value objects.

The contract stores proof types only as 32-byte hashes. A hash can be
mapped back to its name only if the name has been seen locally, so a
lookup result is either a ProofType (name known) or an UnknownProofType
(hash only). The two never compare equal and an UnknownProofType is
never rendered as if the hash were a name.
"""

from __future__ import annotations

from dataclasses import dataclass

HASH_LENGTH = 32


def hash_to_hex(value: bytes) -> str:
    """Render a 32-byte hash as lowercase 0x-prefixed hex."""
    return "0x" + value.hex()


@dataclass(frozen=True)
class ProofType:
    """A named proof type and its canonical on-chain hash.

    Attributes:
        name: Domain identifier, e.g. "BASE_CONTRACT_DEPLOYER".
        hash: keccak-256 digest of the UTF-8 name (32 bytes).
    """

    name: str
    hash: bytes

    @property
    def hash_hex(self) -> str:
        return hash_to_hex(self.hash)

    @property
    def label(self) -> str:
        """Display label (the name)."""
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class UnknownProofType:
    """A proof type hash with no registered reverse mapping.

    Not an error: the chain may carry types this process has never been
    told about.

    Attributes:
        hash: The 32-byte hash as read from the contract.
    """

    hash: bytes

    @property
    def hash_hex(self) -> str:
        return hash_to_hex(self.hash)

    @property
    def label(self) -> str:
        """Display label (the hex hash, marked unknown)."""
        return f"Unknown({self.hash_hex})"

    def __str__(self) -> str:
        return self.label
