"""Configuration for BaseProof."""

from baseproof.config.reader_config import (
    MAINNET_CHAIN_ID,
    NETWORKS,
    SEPOLIA_CHAIN_ID,
    NetworkConfig,
    ReaderConfig,
    StalePolicy,
    load_environment,
)

__all__: list[str] = [
    "MAINNET_CHAIN_ID",
    "NETWORKS",
    "SEPOLIA_CHAIN_ID",
    "NetworkConfig",
    "ReaderConfig",
    "StalePolicy",
    "load_environment",
]
