"""
BaseProof - read model for the on-chain ProofRegistry contract.

One reader, three transports:
- HTTP API (FastAPI) for wallets and dashboards
- In-process SDK for third-party Python consumers
- Command line for operators

Every transport goes through ProofRegistryReader, which batches,
caches and deduplicates contract reads and never reports a revoked
proof as live.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
