"""Reader configuration.

This module defines network selection and reader tuning with
environment variable overrides.

Environment Variables (Network):
- NETWORK: "sepolia" (default) or "mainnet"
- BASE_SEPOLIA_RPC: RPC URL for Base Sepolia (default: https://sepolia.base.org)
- BASE_MAINNET_RPC: RPC URL for Base mainnet (default: https://mainnet.base.org)
- PROOF_REGISTRY_ADDRESS: Deployed ProofRegistry address (required for reads)

Environment Variables (Reader):
- BASEPROOF_CACHE_TTL_SECONDS: Cache entry lifetime (default: 15.0)
- BASEPROOF_CACHE_MAX_ENTRIES: Cache size bound (default: 4096)
- BASEPROOF_MAX_BLOCK_LAG: Block tolerance for cache entries (default: unset)
- BASEPROOF_HEAD_TTL_SECONDS: Reuse window for the head block number (default: 2.0)
- BASEPROOF_RPC_TIMEOUT_SECONDS: Per-operation timeout (default: 10.0)
- BASEPROOF_MAX_CONCURRENCY: Per-id fetch fan-out bound (default: 8)
- BASEPROOF_STALE_POLICY: "fail_closed" (default) or "serve_stale"
- BASEPROOF_RPC_MAX_ATTEMPTS: Transport attempts per call (default: 3)
- BASEPROOF_RPC_BACKOFF_SECONDS: Transport backoff base (default: 0.25)
- PROOF_DEFINITIONS_PATH: Definitions YAML (default: proofs/definitions.yaml)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

SEPOLIA_CHAIN_ID = 84532
MAINNET_CHAIN_ID = 8453


def load_environment(path: str | None = None) -> None:
    """Load a .env file into the process environment.

    Existing variables win over file values.
    """
    load_dotenv(path, override=False)


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_optional_int_env(key: str) -> int | None:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


class StalePolicy(str, Enum):
    """What the reader does when a refresh fails and an expired entry exists."""

    FAIL_CLOSED = "fail_closed"
    SERVE_STALE = "serve_stale"


@dataclass(frozen=True)
class NetworkConfig:
    """A chain the reader can target.

    Attributes:
        key: Short network key ("sepolia", "mainnet").
        name: Display name reported by /stats.
        chain_id: EIP-155 chain id.
        default_rpc_url: Public RPC endpoint used when none is configured.
    """

    key: str
    name: str
    chain_id: int
    default_rpc_url: str

    @property
    def rpc_env_var(self) -> str:
        """Environment variable that overrides the RPC URL for this network."""
        return "BASE_MAINNET_RPC" if self.key == "mainnet" else "BASE_SEPOLIA_RPC"

    @classmethod
    def for_key(cls, key: str) -> NetworkConfig:
        """Look up a network by key ("sepolia" or "mainnet")."""
        try:
            return NETWORKS[key.lower()]
        except KeyError:
            raise ValueError(
                f"unknown network {key!r}, expected one of {sorted(NETWORKS)}"
            ) from None

    @classmethod
    def for_chain_id(cls, chain_id: int) -> NetworkConfig:
        """Look up a network by chain id."""
        for network in NETWORKS.values():
            if network.chain_id == chain_id:
                return network
        raise ValueError(
            f"unsupported chain id {chain_id}, expected {SEPOLIA_CHAIN_ID} or {MAINNET_CHAIN_ID}"
        )


NETWORKS: dict[str, NetworkConfig] = {
    "sepolia": NetworkConfig(
        key="sepolia",
        name="Base Sepolia",
        chain_id=SEPOLIA_CHAIN_ID,
        default_rpc_url="https://sepolia.base.org",
    ),
    "mainnet": NetworkConfig(
        key="mainnet",
        name="Base",
        chain_id=MAINNET_CHAIN_ID,
        default_rpc_url="https://mainnet.base.org",
    ),
}


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for ProofRegistryReader and its transport.

    Attributes:
        network: Target chain. Default: Base Sepolia.
        rpc_url: RPC endpoint. Default: the network's public endpoint.
        proof_registry_address: Contract address. Empty means unconfigured;
            every read then fails with NotConfiguredError.
        cache_ttl_seconds: Lifetime of a cache entry. Default: 15.0.
        cache_max_entries: Cache size bound, oldest evicted first.
        max_block_lag: If set, entries older than this many blocks behind
            the head are treated as expired.
        head_ttl_seconds: How long a fetched head block number is reused.
        rpc_timeout_seconds: Budget for one upstream operation, retries
            included. Default: 10.0.
        max_concurrency: Bound on parallel per-id fetches. Default: 8.
        stale_policy: FAIL_CLOSED (default) or SERVE_STALE.
        rpc_max_attempts: Transport attempts per call. Default: 3.
        rpc_backoff_base_seconds: First retry delay, doubled per attempt.
        definitions_path: Proof definitions YAML, None to skip loading.
    """

    network: NetworkConfig = NETWORKS["sepolia"]
    rpc_url: str = ""
    proof_registry_address: str = ""
    cache_ttl_seconds: float = 15.0
    cache_max_entries: int = 4096
    max_block_lag: int | None = None
    head_ttl_seconds: float = 2.0
    rpc_timeout_seconds: float = 10.0
    max_concurrency: int = 8
    stale_policy: StalePolicy = StalePolicy.FAIL_CLOSED
    rpc_max_attempts: int = 3
    rpc_backoff_base_seconds: float = 0.25
    definitions_path: str | None = "proofs/definitions.yaml"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.rpc_url:
            object.__setattr__(self, "rpc_url", self.network.default_rpc_url)
        if self.cache_ttl_seconds <= 0:
            raise ValueError(
                f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}"
            )
        if self.cache_max_entries < 1:
            raise ValueError(
                f"cache_max_entries must be at least 1, got {self.cache_max_entries}"
            )
        if self.max_block_lag is not None and self.max_block_lag < 0:
            raise ValueError(f"max_block_lag must be non-negative, got {self.max_block_lag}")
        if self.head_ttl_seconds <= 0:
            raise ValueError(f"head_ttl_seconds must be positive, got {self.head_ttl_seconds}")
        if self.rpc_timeout_seconds <= 0:
            raise ValueError(
                f"rpc_timeout_seconds must be positive, got {self.rpc_timeout_seconds}"
            )
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {self.max_concurrency}")
        if self.rpc_max_attempts < 1:
            raise ValueError(f"rpc_max_attempts must be at least 1, got {self.rpc_max_attempts}")
        if self.rpc_backoff_base_seconds < 0:
            raise ValueError(
                f"rpc_backoff_base_seconds must be non-negative, got {self.rpc_backoff_base_seconds}"
            )

    @property
    def is_configured(self) -> bool:
        """True when a contract address is present."""
        return bool(self.proof_registry_address.strip())

    @classmethod
    def from_environment(cls) -> ReaderConfig:
        """Create config from environment variables with defaults.

        Returns:
            ReaderConfig with environment overrides applied.
        """
        network = NetworkConfig.for_key(os.environ.get("NETWORK", "sepolia"))
        definitions_path = os.environ.get("PROOF_DEFINITIONS_PATH", "proofs/definitions.yaml")

        return cls(
            network=network,
            rpc_url=os.environ.get(network.rpc_env_var, ""),
            proof_registry_address=os.environ.get("PROOF_REGISTRY_ADDRESS", ""),
            cache_ttl_seconds=_get_float_env("BASEPROOF_CACHE_TTL_SECONDS", 15.0),
            cache_max_entries=_get_int_env("BASEPROOF_CACHE_MAX_ENTRIES", 4096),
            max_block_lag=_get_optional_int_env("BASEPROOF_MAX_BLOCK_LAG"),
            head_ttl_seconds=_get_float_env("BASEPROOF_HEAD_TTL_SECONDS", 2.0),
            rpc_timeout_seconds=_get_float_env("BASEPROOF_RPC_TIMEOUT_SECONDS", 10.0),
            max_concurrency=_get_int_env("BASEPROOF_MAX_CONCURRENCY", 8),
            stale_policy=StalePolicy(
                os.environ.get("BASEPROOF_STALE_POLICY", StalePolicy.FAIL_CLOSED.value).lower()
            ),
            rpc_max_attempts=_get_int_env("BASEPROOF_RPC_MAX_ATTEMPTS", 3),
            rpc_backoff_base_seconds=_get_float_env("BASEPROOF_RPC_BACKOFF_SECONDS", 0.25),
            definitions_path=definitions_path or None,
        )
