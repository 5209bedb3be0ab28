"""Bootstrap wiring for the ProofRegistry reader.

There is no module-level reader: callers (the API lifespan, the SDK,
the CLI) build one and own its lifecycle.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from baseproof.application.ports.proof_registry_contract import ProofRegistryContractPort
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.config.reader_config import ReaderConfig
from baseproof.domain.services.proof_type_registry import ProofTypeRegistry
from baseproof.infrastructure.adapters.definitions_loader import load_proof_definitions
from baseproof.infrastructure.adapters.web3_proof_registry import Web3ProofRegistry

logger = structlog.get_logger(__name__)


def build_registry(definitions_path: str | Path | None) -> ProofTypeRegistry:
    """Build a proof type registry seeded from the definitions document.

    A missing document is not an error: the registry starts empty and
    learns names as callers resolve them.
    """
    if definitions_path is None:
        return ProofTypeRegistry()
    path = Path(definitions_path)
    if not path.is_file():
        logger.info("proof_definitions_not_found", path=str(path))
        return ProofTypeRegistry()
    return ProofTypeRegistry.from_definitions(load_proof_definitions(path))


def build_reader(
    config: ReaderConfig | None = None,
    contract: ProofRegistryContractPort | None = None,
    registry: ProofTypeRegistry | None = None,
) -> ProofRegistryReader:
    """Wire a reader from configuration.

    Args:
        config: Reader configuration, read from the environment by default.
        contract: Contract port to use instead of the web3 adapter.
        registry: Proof type registry, built from the definitions by default.

    Returns:
        A reader. When no contract address is configured the reader is
        still returned and answers every read with NotConfiguredError.
    """
    config = config or ReaderConfig.from_environment()
    if registry is None:
        registry = build_registry(config.definitions_path)

    if contract is None and config.is_configured:
        contract = Web3ProofRegistry.from_config(config)

    logger.info(
        "proof_registry_reader_built",
        network=config.network.name,
        chain_id=config.network.chain_id,
        configured=config.is_configured,
        known_types=len(registry),
    )
    return ProofRegistryReader(contract, config, registry=registry)


__all__ = ["build_reader", "build_registry"]
