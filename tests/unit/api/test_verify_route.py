"""Unit tests for POST /verify."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from baseproof.api.main import create_app
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.config.reader_config import ReaderConfig
from baseproof.domain.services.proof_type_registry import canonical_hash
from baseproof.infrastructure.stubs import ProofRegistryContractStub
from tests.helpers.proof_registry import DEPLOYER, SUBJECT_A, SUBJECT_B


@pytest.fixture
def client(reader: ProofRegistryReader) -> Iterator[TestClient]:
    with TestClient(create_app(reader=reader)) as client:
        yield client


@pytest.fixture
def unconfigured_client() -> Iterator[TestClient]:
    reader = ProofRegistryReader(None, ReaderConfig(definitions_path=None))
    with TestClient(create_app(reader=reader)) as client:
        yield client


class TestVerify:
    """Tests for verification requests."""

    def test_holder_is_verified(
        self, client: TestClient, contract: ProofRegistryContractStub
    ) -> None:
        contract.issue(SUBJECT_A, DEPLOYER)

        response = client.post("/verify", json={"address": SUBJECT_A, "proofType": DEPLOYER})

        assert response.status_code == 200
        assert response.json() == {
            "address": SUBJECT_A,
            "proofType": DEPLOYER,
            "hasProof": True,
            "verified": True,
        }

    def test_revoked_proof_is_not_verified(
        self, client: TestClient, contract: ProofRegistryContractStub
    ) -> None:
        contract.issue(SUBJECT_A, DEPLOYER, revoked=True)

        body = client.post("/verify", json={"address": SUBJECT_A, "proofType": DEPLOYER}).json()

        assert body["hasProof"] is False
        assert body["verified"] is False

    def test_accepts_hash(self, client: TestClient, contract: ProofRegistryContractStub) -> None:
        contract.issue(SUBJECT_B, DEPLOYER)
        type_hash = "0x" + canonical_hash(DEPLOYER).hex()

        body = client.post("/verify", json={"address": SUBJECT_B, "proofType": type_hash}).json()

        assert body["hasProof"] is True
        assert body["proofType"] == type_hash

    def test_missing_proof_type_is_400(
        self, client: TestClient, contract: ProofRegistryContractStub
    ) -> None:
        response = client.post("/verify", json={"address": SUBJECT_A})

        assert response.status_code == 400
        assert response.json()["detail"]["detail"] == "address and proofType are required"
        assert contract.calls["hasProof"] == 0

    def test_empty_strings_are_400(self, client: TestClient) -> None:
        response = client.post("/verify", json={"address": "", "proofType": " "})

        assert response.status_code == 400

    def test_missing_body_is_400(self, client: TestClient) -> None:
        response = client.post("/verify")

        assert response.status_code == 400
        assert response.json()["detail"]["title"] == "Invalid Request"

    def test_malformed_address_is_400(self, client: TestClient) -> None:
        response = client.post("/verify", json={"address": "0x12", "proofType": DEPLOYER})

        assert response.status_code == 400

    def test_malformed_hash_is_400(self, client: TestClient) -> None:
        response = client.post("/verify", json={"address": SUBJECT_A, "proofType": "0xabc"})

        assert response.status_code == 400
        assert response.json()["detail"]["title"] == "Malformed Hash"

    def test_validation_precedes_configuration(self, unconfigured_client: TestClient) -> None:
        response = unconfigured_client.post("/verify", json={"proofType": DEPLOYER})

        assert response.status_code == 400

    def test_unconfigured_is_503(self, unconfigured_client: TestClient) -> None:
        response = unconfigured_client.post(
            "/verify", json={"address": SUBJECT_A, "proofType": DEPLOYER}
        )

        assert response.status_code == 503

    def test_truncated_hash_is_400_when_unconfigured(
        self, unconfigured_client: TestClient
    ) -> None:
        response = unconfigured_client.post(
            "/verify", json={"address": SUBJECT_A, "proofType": "0x12"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["title"] == "Malformed Hash"
