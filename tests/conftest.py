"""
Pytest configuration and shared fixtures for BaseProof tests.

Testing Standards:
- All async tests use pytest.mark.asyncio
- The in-memory ProofRegistryContractStub stands in for the chain
- Unit tests go in tests/unit/<layer>/
"""

import pytest

from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.application.services.read_cache import reset_stale_flag
from baseproof.config.reader_config import ReaderConfig
from baseproof.domain.services.proof_type_registry import ProofTypeRegistry
from baseproof.infrastructure.stubs import ProofRegistryContractStub
from tests.helpers.proof_registry import CONTRACT_ADDRESS, DEPLOYER, FakeClock


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from baseproof import __version__

    return __version__


@pytest.fixture(autouse=True)
def _clear_stale_flag() -> None:
    reset_stale_flag()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def contract() -> ProofRegistryContractStub:
    return ProofRegistryContractStub()


@pytest.fixture
def config() -> ReaderConfig:
    return ReaderConfig(proof_registry_address=CONTRACT_ADDRESS, definitions_path=None)


@pytest.fixture
def registry() -> ProofTypeRegistry:
    return ProofTypeRegistry([DEPLOYER])


@pytest.fixture
def reader(
    contract: ProofRegistryContractStub,
    config: ReaderConfig,
    registry: ProofTypeRegistry,
    clock: FakeClock,
) -> ProofRegistryReader:
    return ProofRegistryReader(contract, config, registry=registry, clock=clock)
