"""Application services."""

from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.application.services.read_cache import (
    CacheEntry,
    ReadCache,
    read_was_stale,
    reset_stale_flag,
)
from baseproof.application.services.request_coalescer import RequestCoalescer

__all__: list[str] = [
    "CacheEntry",
    "ProofRegistryReader",
    "ReadCache",
    "RequestCoalescer",
    "read_was_stale",
    "reset_stale_flag",
]
