"""Unit tests for ProofTypeRegistry and canonical hashing.

Key Test Scenarios:
1. canonical_hash is keccak-256 of the UTF-8 name
2. reverse_lookup(canonical_hash(name)) returns the registered name
3. Unregistered hashes come back as UnknownProofType, never as a name
4. Wrong-width hashes raise MalformedHashError
5. Names learned from callers stay within the configured cap
"""

import pytest

from baseproof.domain.errors import MalformedHashError, ProofValidationError
from baseproof.domain.models.proof_definition import ProofDefinition
from baseproof.domain.models.proof_type import ProofType, UnknownProofType
from baseproof.domain.services.proof_type_registry import (
    ProofTypeRegistry,
    canonical_hash,
    looks_like_hash,
    parse_hash,
)

KECCAK_EMPTY = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
KECCAK_HELLO = "1c8aff950685c2ed4bc3174f3472287b56d9517b9c948127319a09a7a36deac8"


class TestCanonicalHash:
    """Tests for canonical_hash()."""

    def test_known_keccak_vectors(self) -> None:
        assert canonical_hash("").hex() == KECCAK_EMPTY
        assert canonical_hash("hello").hex() == KECCAK_HELLO

    def test_is_deterministic_and_32_bytes(self) -> None:
        first = canonical_hash("BASE_CONTRACT_DEPLOYER")
        second = canonical_hash("BASE_CONTRACT_DEPLOYER")

        assert first == second
        assert len(first) == 32

    def test_distinct_names_hash_differently(self) -> None:
        assert canonical_hash("BASE_USER") != canonical_hash("BASE_TESTNET_USER")

    def test_not_a_padded_encoding(self) -> None:
        """The digest is not the name's bytes left-padded to 32."""
        name = "BASE_USER"
        padded = name.encode().rjust(32, b"\x00")

        assert canonical_hash(name) != padded


class TestParseHash:
    """Tests for parse_hash() and looks_like_hash()."""

    def test_accepts_prefixed_and_bare_hex(self) -> None:
        digest = canonical_hash("BASE_USER")

        assert parse_hash("0x" + digest.hex()) == digest
        assert parse_hash(digest.hex()) == digest
        assert parse_hash(digest) == digest

    def test_rejects_short_hash(self) -> None:
        with pytest.raises(MalformedHashError) as exc_info:
            parse_hash("0x1234")

        assert exc_info.value.length == 2
        assert exc_info.value.field == "proofType"

    def test_rejects_long_bytes(self) -> None:
        with pytest.raises(MalformedHashError):
            parse_hash(bytes(33))

    def test_rejects_non_hex(self) -> None:
        with pytest.raises(MalformedHashError) as exc_info:
            parse_hash("0xnothex")

        assert exc_info.value.length is None

    def test_malformed_hash_is_a_validation_error(self) -> None:
        with pytest.raises(ProofValidationError):
            parse_hash(b"\x01")

    def test_looks_like_hash(self) -> None:
        assert looks_like_hash("0x" + "ab" * 32)
        assert not looks_like_hash("0x" + "ab" * 31)
        assert not looks_like_hash("BASE_USER")


class TestProofTypeRegistry:
    """Tests for registration and reverse lookup."""

    def test_reverse_lookup_returns_registered_name(self) -> None:
        registry = ProofTypeRegistry()
        registry.register("BASE_CONTRACT_DEPLOYER")

        result = registry.reverse_lookup(canonical_hash("BASE_CONTRACT_DEPLOYER"))

        assert isinstance(result, ProofType)
        assert result.name == "BASE_CONTRACT_DEPLOYER"

    def test_reverse_lookup_accepts_hex(self) -> None:
        registry = ProofTypeRegistry(["BASE_USER"])

        result = registry.reverse_lookup("0x" + canonical_hash("BASE_USER").hex())

        assert result == ProofType(name="BASE_USER", hash=canonical_hash("BASE_USER"))

    def test_unregistered_hash_is_unknown(self) -> None:
        registry = ProofTypeRegistry(["BASE_USER"])
        unseen = canonical_hash("NEVER_REGISTERED")

        result = registry.reverse_lookup(unseen)

        assert result == UnknownProofType(hash=unseen)
        assert result.label == f"Unknown(0x{unseen.hex()})"
        assert result.label != "NEVER_REGISTERED"

    def test_unknown_never_equals_known(self) -> None:
        digest = canonical_hash("BASE_USER")

        assert UnknownProofType(hash=digest) != ProofType(name="BASE_USER", hash=digest)

    def test_reverse_lookup_rejects_malformed(self) -> None:
        registry = ProofTypeRegistry()

        with pytest.raises(MalformedHashError):
            registry.reverse_lookup(b"\x00" * 20)

    def test_register_is_idempotent(self) -> None:
        registry = ProofTypeRegistry()

        first = registry.register("BASE_USER")
        second = registry.register("BASE_USER")

        assert first is second
        assert len(registry) == 1

    def test_register_rejects_empty_name(self) -> None:
        registry = ProofTypeRegistry()

        with pytest.raises(ProofValidationError):
            registry.register("   ")

    def test_resolve_registers_names(self) -> None:
        registry = ProofTypeRegistry()

        digest = registry.resolve("BASE_TESTNET_USER")

        assert digest == canonical_hash("BASE_TESTNET_USER")
        assert "BASE_TESTNET_USER" in registry

    def test_resolve_passes_hashes_through(self) -> None:
        registry = ProofTypeRegistry()
        digest = canonical_hash("SOMETHING")

        assert registry.resolve("0x" + digest.hex()) == digest
        assert len(registry) == 0

    def test_resolve_rejects_truncated_hash(self) -> None:
        registry = ProofTypeRegistry()

        with pytest.raises(MalformedHashError):
            registry.resolve("0x1234")

        assert len(registry) == 0

    def test_describe(self) -> None:
        registry = ProofTypeRegistry(["BASE_USER"])
        unknown = canonical_hash("OTHER")

        assert registry.describe("BASE_USER").label == "BASE_USER"
        assert isinstance(registry.describe("0x" + unknown.hex()), UnknownProofType)

    def test_from_definitions(self) -> None:
        registry = ProofTypeRegistry.from_definitions(
            [ProofDefinition(type="BASE_USER"), ProofDefinition(type="BASE_CONTRACT_DEPLOYER")]
        )

        assert [t.name for t in registry.known_types()] == [
            "BASE_USER",
            "BASE_CONTRACT_DEPLOYER",
        ]


class TestLearnedNames:
    """Tests for the bounded table of names learned through resolve()."""

    def test_learned_names_capped(self) -> None:
        registry = ProofTypeRegistry(["BASE_USER"], max_learned=100)

        for i in range(5000):
            registry.resolve(f"JUNK_{i}")

        assert len(registry) == 101
        assert "BASE_USER" in registry
        assert registry.reverse_lookup(canonical_hash("BASE_USER")).label == "BASE_USER"

    def test_oldest_learned_name_evicted_first(self) -> None:
        registry = ProofTypeRegistry(max_learned=2)

        registry.resolve("FIRST")
        registry.resolve("SECOND")
        registry.resolve("THIRD")

        assert isinstance(registry.reverse_lookup(canonical_hash("FIRST")), UnknownProofType)
        assert registry.reverse_lookup(canonical_hash("THIRD")).label == "THIRD"
        assert [t.name for t in registry.known_types()] == ["SECOND", "THIRD"]

    def test_resolving_again_refreshes_a_learned_name(self) -> None:
        registry = ProofTypeRegistry(max_learned=2)

        registry.resolve("FIRST")
        registry.resolve("SECOND")
        registry.resolve("FIRST")
        registry.resolve("THIRD")

        assert "FIRST" in registry
        assert "SECOND" not in registry

    def test_registered_names_never_evicted(self) -> None:
        registry = ProofTypeRegistry(max_learned=1)
        registry.register("BASE_USER")

        for i in range(10):
            registry.describe(f"JUNK_{i}")

        assert "BASE_USER" in registry
        assert len(registry) == 2

    def test_register_pins_a_learned_name(self) -> None:
        registry = ProofTypeRegistry(max_learned=1)

        registry.resolve("BASE_USER")
        registry.register("BASE_USER")
        registry.resolve("JUNK_1")
        registry.resolve("JUNK_2")

        assert "BASE_USER" in registry

    def test_zero_cap_still_hashes(self) -> None:
        registry = ProofTypeRegistry(max_learned=0)

        assert registry.resolve("BASE_USER") == canonical_hash("BASE_USER")
        assert len(registry) == 0

    def test_negative_cap_rejected(self) -> None:
        with pytest.raises(ValueError):
            ProofTypeRegistry(max_learned=-1)


class TestValidate:
    """Tests for checking a proof type without learning it."""

    def test_accepts_name_without_learning(self) -> None:
        registry = ProofTypeRegistry()

        registry.validate("BASE_USER")

        assert len(registry) == 0

    def test_accepts_full_hash(self) -> None:
        ProofTypeRegistry().validate("0x" + canonical_hash("BASE_USER").hex())

    def test_rejects_truncated_hash(self) -> None:
        with pytest.raises(MalformedHashError):
            ProofTypeRegistry().validate("0x12")

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_rejects_empty_or_non_string(self, value: object) -> None:
        with pytest.raises(ProofValidationError):
            ProofTypeRegistry().validate(value)
