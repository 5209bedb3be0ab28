"""ProofRegistry read model.

Batched, cached, deduplicated and revocation-aware access to the
ProofRegistry contract. The HTTP API, the SDK and the CLI are all thin
transports over one instance of this service.

Developer Golden Rules:
1. CONFIG FIRST - no contract address means NotConfiguredError, zero RPC calls
2. VALIDATE BEFORE NETWORK - malformed input never reaches the chain client
3. BOUNDED FAN-OUT - per-id fetches share one semaphore per reader
4. ONE FETCH PER KEY - concurrent callers join the in-flight request
5. NO POISONING - failed or timed-out fetches never write to the cache
6. NEVER ROLL BACK - totalProofs is reported as a high-water mark
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from baseproof.application.ports.proof_registry_contract import (
    ProofRecord,
    ProofRegistryContractPort,
)
from baseproof.application.services.base import LoggingMixin
from baseproof.application.services.read_cache import (
    CacheKey,
    ReadCache,
    mark_stale_read,
    read_was_stale,
    reset_stale_flag,
)
from baseproof.application.services.request_coalescer import RequestCoalescer
from baseproof.config.reader_config import ReaderConfig, StalePolicy
from baseproof.domain.errors import (
    NotConfiguredError,
    ProofValidationError,
    RpcFailureError,
    RpcTimeoutError,
)
from baseproof.domain.exceptions import BaseProofError
from baseproof.domain.models.proof import HolderSet, Proof, VerificationResult
from baseproof.domain.services.address_validator import normalize_address
from baseproof.domain.services.proof_type_registry import ProofTypeRegistry

T = TypeVar("T")

_HEAD_KEY = ("blockNumber",)


class ProofRegistryReader(LoggingMixin):
    """Read model over the ProofRegistry contract.

    Attributes:
        _contract: Contract port, None when the reader is unconfigured.
        _config: Reader configuration.
        _registry: Proof type name <-> hash table.
        _cache: Snapshot cache keyed by (operation, *arguments).
        _coalescer: In-flight deduplication table.
        _semaphore: Bound on parallel per-id fetches.
        _total_high_water: Highest totalProofs value seen by this instance.
        _head: Last fetched (block number, monotonic time), if any.
    """

    def __init__(
        self,
        contract: ProofRegistryContractPort | None,
        config: ReaderConfig,
        registry: ProofTypeRegistry | None = None,
        cache: ReadCache | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the reader.

        Args:
            contract: Contract port (web3 adapter or stub). None is allowed
                and behaves like a missing contract address.
            config: Reader configuration.
            registry: Proof type registry, empty by default.
            cache: Read cache, built from config by default.
            clock: Monotonic time source shared with the cache.
        """
        self._contract = contract
        self._config = config
        self._registry = registry if registry is not None else ProofTypeRegistry()
        self._clock = clock
        self._cache = cache if cache is not None else ReadCache(
            ttl_seconds=config.cache_ttl_seconds,
            max_entries=config.cache_max_entries,
            max_block_lag=config.max_block_lag,
            clock=clock,
        )
        self._coalescer = RequestCoalescer()
        self._semaphore = asyncio.Semaphore(config.max_concurrency)
        self._total_high_water = 0
        self._head: tuple[int, float] | None = None

        self._init_logger(component="reader")

    async def __aenter__(self) -> ProofRegistryReader:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def registry(self) -> ProofTypeRegistry:
        return self._registry

    @property
    def cache(self) -> ReadCache:
        return self._cache

    @property
    def is_configured(self) -> bool:
        return self._contract is not None and self._config.is_configured

    # =========================================================================
    # Proof lookups
    # =========================================================================

    async def get_proof_records(self, subject: str) -> list[Proof]:
        """Fetch every proof record of a subject, revoked ones included.

        One getProofs() round trip for the id list, then one getProof()
        per id under the reader's concurrency bound. Order follows the
        id list as returned on-chain.

        Args:
            subject: Subject address.

        Returns:
            All records, revoked included.
        """
        contract = self._require_contract()
        subject = normalize_address(subject, "subject")
        records = await self._read(
            ("getProofs", subject),
            lambda: self._fetch_proof_batch(contract, subject),
        )
        return list(records)

    async def get_proofs(self, subject: str) -> list[Proof]:
        """Fetch a subject's live proofs (revoked records removed).

        Args:
            subject: Subject address.

        Returns:
            Non-revoked proofs in on-chain order.
        """
        records = await self.get_proof_records(subject)
        return [proof for proof in records if not proof.revoked]

    async def has_proof(self, subject: str, proof_type: str) -> bool:
        """Check whether subject holds a live proof of proof_type.

        The contract's hasProof is authoritative for revocation; its
        answer is returned as is.

        Args:
            subject: Subject address.
            proof_type: Type name or 0x-prefixed bytes32 hash.

        Returns:
            True only if the contract reports a live proof.
        """
        contract = self._require_contract()
        subject = normalize_address(subject, "subject")
        type_hash = self._registry.resolve(proof_type)
        return await self._read(
            ("hasProof", subject, type_hash),
            lambda: self._call("hasProof", lambda: contract.has_proof(subject, type_hash)),
        )

    async def get_proofs_by_type(self, subject: str, proof_type: str) -> list[int]:
        """Fetch the ids of a subject's proofs of one type.

        Args:
            subject: Subject address.
            proof_type: Type name or 0x-prefixed bytes32 hash.

        Returns:
            Proof ids as returned by the contract.
        """
        contract = self._require_contract()
        subject = normalize_address(subject, "subject")
        type_hash = self._registry.resolve(proof_type)

        async def fetch() -> list[int]:
            ids = await self._call(
                "getProofsByType", lambda: contract.get_proofs_by_type(subject, type_hash)
            )
            return [int(proof_id) for proof_id in ids]

        return list(await self._read(("getProofsByType", subject, type_hash), fetch))

    async def get_proof_type_holders(
        self, proof_type: str, live_only: bool = False
    ) -> list[str]:
        """Fetch the holders of a proof type.

        Args:
            proof_type: Type name or 0x-prefixed bytes32 hash.
            live_only: Re-check each holder with hasProof and drop those
                whose proofs are all revoked.

        Returns:
            Lowercase addresses, duplicates removed, first-seen order kept.
        """
        contract = self._require_contract()
        type_hash = self._registry.resolve(proof_type)

        async def fetch() -> tuple[str, ...]:
            holders = await self._call(
                "getProofTypeHolders", lambda: contract.get_proof_type_holders(type_hash)
            )
            return _unique_lower(holders)

        holders = await self._read(("getProofTypeHolders", type_hash), fetch)
        if not live_only:
            return list(holders)

        type_hex = "0x" + type_hash.hex()

        async def confirm(holder: str) -> tuple[bool, bool]:
            # Runs in its own task context; report staleness back explicitly.
            reset_stale_flag()
            async with self._semaphore:
                live = await self.has_proof(holder, type_hex)
            return live, read_was_stale()

        checks = await _gather_or_cancel(confirm(holder) for holder in holders)
        if any(stale for _, stale in checks):
            mark_stale_read()
        return [holder for holder, (live, _) in zip(holders, checks) if live]

    async def get_holder_set(self, proof_type: str, live_only: bool = False) -> HolderSet:
        """Holder view carrying the resolved proof type."""
        holders = await self.get_proof_type_holders(proof_type, live_only=live_only)
        return HolderSet(
            proof_type=self._registry.describe(proof_type),
            holders=tuple(holders),
            live_only=live_only,
        )

    async def get_total_proofs(self) -> int:
        """Fetch the number of proofs ever issued.

        Returns:
            The highest value observed by this reader; a lower value from a
            lagging node or an older cache entry never rolls it back.
        """
        contract = self._require_contract()

        async def fetch() -> int:
            return int(await self._call("totalProofs", contract.total_proofs))

        observed = await self._read(("totalProofs",), fetch)
        if observed > self._total_high_water:
            self._total_high_water = observed
        return self._total_high_water

    async def verify(self, address: Any, proof_type: Any) -> VerificationResult:
        """Validate inputs, then check has_proof.

        Inputs are validated before the configuration check so a caller
        with a malformed request gets a 400, not a 503.

        Args:
            address: Subject address.
            proof_type: Type name or 0x-prefixed bytes32 hash.

        Returns:
            VerificationResult echoing the inputs.

        Raises:
            ProofValidationError: If either input is missing or malformed.
        """
        missing = [
            name
            for name, value in (("address", address), ("proofType", proof_type))
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ProofValidationError(missing[0], "address and proofType are required")
        if not isinstance(proof_type, str):
            raise ProofValidationError("proofType", "proofType must be a string", proof_type)
        normalize_address(address, "address")
        self._registry.validate(proof_type)

        has = await self.has_proof(address, proof_type)
        return VerificationResult(address=address, proof_type=proof_type, has_proof=has)

    async def get_block_number(self) -> int:
        """Current head block number, reused for head_ttl_seconds."""
        contract = self._require_contract()
        if self._head is not None:
            block, fetched_at = self._head
            if self._clock() - fetched_at < self._config.head_ttl_seconds:
                return block

        block = await self._coalescer.run(
            _HEAD_KEY,
            lambda: self._call("blockNumber", contract.block_number),
        )
        block = int(block)
        self._head = (block, self._clock())
        return block

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def invalidate(self, subject: str | None = None) -> int:
        """Drop cached entries, all of them or those for one subject.

        Returns:
            Number of entries dropped.
        """
        if subject is None:
            count = len(self._cache)
            self._cache.clear()
            return count
        subject = subject.lower()
        return self._cache.invalidate_where(lambda key: len(key) > 1 and key[1] == subject)

    async def close(self) -> None:
        """Release the contract transport."""
        if self._contract is not None:
            await self._contract.close()
            self._log_operation("close").info("reader_closed")

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_contract(self) -> ProofRegistryContractPort:
        if self._contract is None or not self._config.is_configured:
            raise NotConfiguredError()
        return self._contract

    async def _read(self, key: CacheKey, fetch: Callable[[], Awaitable[T]]) -> T:
        """Serve key from cache or fetch it once for every concurrent caller."""
        log = self._log_operation(str(key[0]))
        entry = self._cache.lookup(key)
        try:
            head = await self._current_head()
            if entry is not None and self._cache.is_fresh(entry, head):
                log.debug("cache_hit")
                return entry.value

            log.debug("cache_miss", expired=entry is not None)
            return await self._coalescer.run(key, lambda: self._fetch_and_store(key, fetch, head))
        except (RpcTimeoutError, RpcFailureError) as exc:
            if entry is None or self._config.stale_policy is not StalePolicy.SERVE_STALE:
                log.warning("read_failed", error_type=type(exc).__name__, error=str(exc))
                raise
            mark_stale_read()
            log.warning(
                "stale_entry_served",
                error_type=type(exc).__name__,
                error=str(exc),
                age_seconds=round(entry.age(self._clock()), 3),
            )
            return entry.value

    async def _fetch_and_store(
        self, key: CacheKey, fetch: Callable[[], Awaitable[T]], head: int | None
    ) -> T:
        value = await fetch()
        self._cache.set(key, value, block=head)
        return value

    async def _current_head(self) -> int | None:
        if self._config.max_block_lag is None:
            return None
        return await self.get_block_number()

    async def _call(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run one contract call under the configured timeout."""
        timeout = self._config.rpc_timeout_seconds
        try:
            return await asyncio.wait_for(call(), timeout=timeout)
        except asyncio.TimeoutError:
            raise RpcTimeoutError(operation, timeout) from None
        except BaseProofError:
            raise
        except Exception as exc:
            raise RpcFailureError(operation, str(exc)) from exc

    async def _fetch_proof_batch(
        self, contract: ProofRegistryContractPort, subject: str
    ) -> tuple[Proof, ...]:
        log = self._log_operation("get_proofs", subject=subject)
        proof_ids = await self._call("getProofs", lambda: contract.get_proof_ids(subject))

        async def fetch_one(proof_id: int) -> Proof:
            async with self._semaphore:
                record = await self._call("getProof", lambda: contract.get_proof(proof_id))
            return self._to_proof(proof_id, record)

        proofs = await _gather_or_cancel(fetch_one(int(proof_id)) for proof_id in proof_ids)
        log.info(
            "proof_batch_fetched",
            fetched=len(proofs),
            revoked=sum(1 for proof in proofs if proof.revoked),
        )
        return tuple(proofs)

    def _to_proof(self, proof_id: int, record: ProofRecord) -> Proof:
        return Proof(
            id=proof_id,
            proof_type=self._registry.reverse_lookup(record.proof_type_hash),
            proof_type_hash=bytes(record.proof_type_hash),
            subject=record.subject.lower(),
            metadata_hash=bytes(record.metadata_hash),
            timestamp=int(record.timestamp),
            issuer=record.issuer.lower(),
            revoked=bool(record.revoked),
        )


def _unique_lower(addresses: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for address in addresses:
        seen.setdefault(address.lower(), None)
    return tuple(seen)


async def _gather_or_cancel(coros: Iterable[Awaitable[T]]) -> list[T]:
    """gather() that cancels the siblings of the first failure."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
