"""Proof type registry: canonical hashing and reverse lookup.

The ProofRegistry contract stores a proof type as keccak256(bytes(name)).
Hashing is one-way, so turning a hash read from the chain back into a
name requires a local table of names this process has seen, either
through explicit registration, the definitions document, or a caller
resolving a name for a query.

Developer Golden Rules:
1. ONE HASH FUNCTION - every producer and consumer uses canonical_hash()
2. NEVER PASS A HASH OFF AS A NAME - unknown hashes become UnknownProofType
3. MALFORMED IS NOT UNKNOWN - wrong-width input raises MalformedHashError
4. BOUNDED LEARNING - names learned from callers are capped, oldest evicted first
"""

from __future__ import annotations

import re
from collections import OrderedDict
from collections.abc import Iterable

from eth_utils import keccak

from baseproof.domain.errors.validation import MalformedHashError, ProofValidationError
from baseproof.domain.models.proof_definition import ProofDefinition
from baseproof.domain.models.proof_type import HASH_LENGTH, ProofType, UnknownProofType

_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

DEFAULT_MAX_LEARNED = 1024


def canonical_hash(name: str) -> bytes:
    """Hash a proof type name to its 32-byte on-chain form.

    Args:
        name: Proof type identifier.

    Returns:
        keccak-256 digest of the UTF-8 encoded name.
    """
    return keccak(text=name)


def looks_like_hash(value: str) -> bool:
    """True if value is a 0x-prefixed 32-byte hex string."""
    return bool(_HASH_PATTERN.match(value))


def _is_hash_form(value: object) -> bool:
    return isinstance(value, str) and value[:2].lower() == "0x"


def parse_hash(value: bytes | str) -> bytes:
    """Decode a hash given as bytes or hex into exactly 32 bytes.

    Args:
        value: Raw bytes (including HexBytes) or hex with optional 0x prefix.

    Returns:
        The 32 raw bytes.

    Raises:
        MalformedHashError: If the value is not hex or not 32 bytes wide.
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        text = value[2:] if value[:2].lower() == "0x" else value
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise MalformedHashError(value) from None
    else:
        raise MalformedHashError(value)

    if len(raw) != HASH_LENGTH:
        raise MalformedHashError(value, length=len(raw))
    return raw


class ProofTypeRegistry:
    """Bidirectional name <-> hash table for proof types.

    Names come in two ways. Registered names (constructor, definitions
    document, register()) are kept for the life of the registry. Names
    learned from callers through resolve()/describe() go into a bounded
    table, oldest evicted first, so arbitrary client input cannot grow
    it without limit.

    Lookups and registrations never await, so the table is safe to share
    between coroutines on one event loop.
    """

    def __init__(
        self, names: Iterable[str] = (), max_learned: int = DEFAULT_MAX_LEARNED
    ) -> None:
        if max_learned < 0:
            raise ValueError(f"max_learned must be non-negative, got {max_learned}")
        self._by_name: dict[str, ProofType] = {}
        self._by_hash: dict[bytes, ProofType] = {}
        self._learned: OrderedDict[str, None] = OrderedDict()
        self._max_learned = max_learned
        for name in names:
            self.register(name)

    @classmethod
    def from_definitions(cls, definitions: Iterable[ProofDefinition]) -> ProofTypeRegistry:
        """Build a registry seeded with every type in the definitions document."""
        return cls(definition.type for definition in definitions)

    def register(self, name: str) -> ProofType:
        """Register a proof type name permanently.

        Args:
            name: Proof type identifier.

        Returns:
            The ProofType (existing one if already known).

        Raises:
            ProofValidationError: If name is empty.
        """
        proof_type = self._add(name)
        self._learned.pop(name, None)
        return proof_type

    def reverse_lookup(self, value: bytes | str) -> ProofType | UnknownProofType:
        """Map a hash back to its known type.

        Args:
            value: 32-byte hash as bytes or hex.

        Returns:
            The known ProofType, or UnknownProofType(hash) if no name is
            known for it.

        Raises:
            MalformedHashError: If value is not a 32-byte hash.
        """
        raw = parse_hash(value)
        return self._by_hash.get(raw) or UnknownProofType(hash=raw)

    def validate(self, proof_type: object) -> None:
        """Check a caller-supplied proof type without learning it.

        Raises:
            ProofValidationError: If proof_type is empty or not a string.
            MalformedHashError: If a 0x value is not a 32-byte hash.
        """
        if _is_hash_form(proof_type):
            parse_hash(proof_type)
        elif not isinstance(proof_type, str) or not proof_type.strip():
            raise ProofValidationError(
                "proofType", "proofType must be a non-empty string", proof_type
            )

    def resolve(self, proof_type: str) -> bytes:
        """Turn a caller-supplied proof type into its on-chain hash.

        Accepts either a name (hashed and learned) or an explicit
        0x-prefixed 32-byte hash (used as is). Anything starting with 0x is
        treated as a hash, so a truncated hash is rejected rather than
        learned as a name.

        Raises:
            ProofValidationError: If proof_type is empty.
            MalformedHashError: If a 0x value is not a 32-byte hash.
        """
        if _is_hash_form(proof_type):
            return parse_hash(proof_type)
        return self._learn(proof_type).hash

    def describe(self, proof_type: str) -> ProofType | UnknownProofType:
        """Resolve a caller-supplied proof type to a value object."""
        if _is_hash_form(proof_type):
            return self.reverse_lookup(proof_type)
        return self._learn(proof_type)

    def known_types(self) -> list[ProofType]:
        """All known types, registered and learned, in insertion order."""
        return list(self._by_name.values())

    def _add(self, name: str) -> ProofType:
        if not isinstance(name, str) or not name.strip():
            raise ProofValidationError("proofType", "proofType must be a non-empty string", name)

        existing = self._by_name.get(name)
        if existing is not None:
            return existing

        proof_type = ProofType(name=name, hash=canonical_hash(name))
        self._by_name[name] = proof_type
        self._by_hash[proof_type.hash] = proof_type
        return proof_type

    def _learn(self, name: str) -> ProofType:
        if name in self._by_name and name not in self._learned:
            return self._by_name[name]

        proof_type = self._add(name)
        self._learned[name] = None
        self._learned.move_to_end(name)
        while len(self._learned) > self._max_learned:
            evicted, _ = self._learned.popitem(last=False)
            dropped = self._by_name.pop(evicted)
            self._by_hash.pop(dropped.hash, None)
        return proof_type

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)
