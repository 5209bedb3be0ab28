"""Unit tests for the BaseProof SDK client."""

import pytest

from baseproof.config.reader_config import MAINNET_CHAIN_ID, SEPOLIA_CHAIN_ID, ReaderConfig
from baseproof.domain.errors import NotConfiguredError, ProofValidationError
from baseproof.domain.models.proof_type import ProofType, UnknownProofType
from baseproof.domain.services.proof_type_registry import canonical_hash
from baseproof.infrastructure.stubs import ProofRegistryContractStub
from baseproof.sdk import BaseProof, BaseProofConfig, create_base_proof
from tests.helpers.proof_registry import CONTRACT_ADDRESS, DEPLOYER, SUBJECT_A, SUBJECT_B


@pytest.fixture
def client(contract: ProofRegistryContractStub) -> BaseProof:
    return BaseProof(CONTRACT_ADDRESS, contract=contract, proof_types=[DEPLOYER])


class TestConstruction:
    """Tests for client construction."""

    def test_defaults_to_sepolia(self, client: BaseProof) -> None:
        assert client.chain_id == SEPOLIA_CHAIN_ID
        assert client.proof_registry_address == CONTRACT_ADDRESS

    def test_mainnet_chain_id(self, contract: ProofRegistryContractStub) -> None:
        client = BaseProof(CONTRACT_ADDRESS, chain_id=MAINNET_CHAIN_ID, contract=contract)

        assert client.reader.config.network.name == "Base"
        assert client.reader.config.rpc_url == "https://mainnet.base.org"

    def test_unsupported_chain_id(self, contract: ProofRegistryContractStub) -> None:
        with pytest.raises(ValueError, match="unsupported chain id"):
            BaseProof(CONTRACT_ADDRESS, chain_id=1, contract=contract)

    def test_reader_options_pass_through(self, contract: ProofRegistryContractStub) -> None:
        client = BaseProof(CONTRACT_ADDRESS, contract=contract, cache_ttl_seconds=1.5)

        assert client.reader.config.cache_ttl_seconds == 1.5

    def test_create_from_config(self, contract: ProofRegistryContractStub) -> None:
        config = BaseProofConfig(
            proof_registry_address=CONTRACT_ADDRESS, rpc_url="http://localhost:8545"
        )

        client = create_base_proof(config, contract=contract)

        assert client.reader.config.rpc_url == "http://localhost:8545"

    def test_from_reader_shares_reader(self, reader) -> None:
        assert BaseProof.from_reader(reader).reader is reader


class TestProofTypes:
    """Tests for proof type helpers."""

    def test_hash_proof_type(self) -> None:
        assert BaseProof.hash_proof_type(DEPLOYER) == "0x" + canonical_hash(DEPLOYER).hex()

    def test_lookup_registered_type(self, client: BaseProof) -> None:
        found = client.lookup_proof_type(canonical_hash(DEPLOYER))

        assert isinstance(found, ProofType)
        assert found.name == DEPLOYER

    def test_lookup_unregistered_hash(self, client: BaseProof) -> None:
        assert isinstance(client.lookup_proof_type(b"\x07" * 32), UnknownProofType)

    def test_register_enables_lookup(self, client: BaseProof) -> None:
        client.register_proof_type("BASE_USER")

        assert client.lookup_proof_type(canonical_hash("BASE_USER")).label == "BASE_USER"


class TestReads:
    """Tests for reads delegated to the reader."""

    @pytest.mark.asyncio
    async def test_get_proofs_filters_revoked(
        self, client: BaseProof, contract: ProofRegistryContractStub
    ) -> None:
        contract.issue(SUBJECT_A, DEPLOYER)
        contract.issue(SUBJECT_A, DEPLOYER, revoked=True)

        assert len(await client.get_proofs(SUBJECT_A)) == 1
        assert len(await client.get_proof_records(SUBJECT_A)) == 2

    @pytest.mark.asyncio
    async def test_has_proof_and_verify(
        self, client: BaseProof, contract: ProofRegistryContractStub
    ) -> None:
        contract.issue(SUBJECT_A, DEPLOYER)

        assert await client.has_proof(SUBJECT_A, DEPLOYER) is True
        assert (await client.verify(SUBJECT_B, DEPLOYER)).has_proof is False

    @pytest.mark.asyncio
    async def test_holders_and_total(
        self, client: BaseProof, contract: ProofRegistryContractStub
    ) -> None:
        contract.issue(SUBJECT_A, DEPLOYER)
        contract.issue(SUBJECT_B, DEPLOYER, revoked=True)

        assert await client.get_proof_type_holders(DEPLOYER) == [SUBJECT_A, SUBJECT_B]
        assert await client.get_proof_type_holders(DEPLOYER, live_only=True) == [SUBJECT_A]
        assert SUBJECT_B in await client.get_holder_set(DEPLOYER)
        assert await client.get_total_proofs() == 2

    @pytest.mark.asyncio
    async def test_get_proofs_by_type(
        self, client: BaseProof, contract: ProofRegistryContractStub
    ) -> None:
        proof_id = contract.issue(SUBJECT_A, DEPLOYER)
        contract.issue(SUBJECT_A, "BASE_USER")

        assert await client.get_proofs_by_type(SUBJECT_A, DEPLOYER) == [proof_id]

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(
        self, client: BaseProof, contract: ProofRegistryContractStub
    ) -> None:
        await client.get_proofs(SUBJECT_A)
        await client.get_proofs(SUBJECT_A)
        assert contract.calls["getProofs"] == 1

        assert client.invalidate(SUBJECT_A) == 1
        await client.get_proofs(SUBJECT_A)

        assert contract.calls["getProofs"] == 2

    @pytest.mark.asyncio
    async def test_malformed_address_rejected(self, client: BaseProof) -> None:
        with pytest.raises(ProofValidationError):
            await client.get_proofs("0xnothex")

    @pytest.mark.asyncio
    async def test_unconfigured_client_raises(self) -> None:
        client = BaseProof("")

        with pytest.raises(NotConfiguredError):
            await client.get_proofs(SUBJECT_A)

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(
        self, contract: ProofRegistryContractStub
    ) -> None:
        async with BaseProof(CONTRACT_ADDRESS, contract=contract) as client:
            await client.get_total_proofs()

        assert contract.closed is True


def test_config_is_frozen() -> None:
    config = BaseProofConfig(proof_registry_address=CONTRACT_ADDRESS)

    with pytest.raises(AttributeError):
        config.chain_id = MAINNET_CHAIN_ID  # type: ignore[misc]


def test_reader_config_not_loaded_from_definitions(client: BaseProof) -> None:
    assert client.reader.config.definitions_path is None
    assert isinstance(client.reader.config, ReaderConfig)
