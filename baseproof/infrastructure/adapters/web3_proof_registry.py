"""web3.py adapter for the ProofRegistry contract.

Implements ProofRegistryContractPort over JSON-RPC with AsyncWeb3.

Retry policy lives here, not in the reader: transient transport failures
(connection errors, HTTP timeouts) are retried with bounded exponential
backoff; contract reverts and malformed responses are not retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp
import structlog
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from baseproof.application.ports.proof_registry_contract import ProofRecord
from baseproof.config.reader_config import ReaderConfig
from baseproof.domain.errors import NotConfiguredError, RpcFailureError, RpcTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

MAX_BACKOFF_SECONDS = 5.0

PROOF_REGISTRY_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getProofs",
        "stateMutability": "view",
        "inputs": [{"name": "subject", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256[]"}],
    },
    {
        "type": "function",
        "name": "getProof",
        "stateMutability": "view",
        "inputs": [{"name": "proofId", "type": "uint256"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "proofType", "type": "bytes32"},
                    {"name": "subject", "type": "address"},
                    {"name": "metadataHash", "type": "bytes32"},
                    {"name": "timestamp", "type": "uint256"},
                    {"name": "issuer", "type": "address"},
                    {"name": "revoked", "type": "bool"},
                ],
            }
        ],
    },
    {
        "type": "function",
        "name": "hasProof",
        "stateMutability": "view",
        "inputs": [
            {"name": "subject", "type": "address"},
            {"name": "proofType", "type": "bytes32"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "getProofsByType",
        "stateMutability": "view",
        "inputs": [
            {"name": "subject", "type": "address"},
            {"name": "proofType", "type": "bytes32"},
        ],
        "outputs": [{"name": "", "type": "uint256[]"}],
    },
    {
        "type": "function",
        "name": "getProofTypeHolders",
        "stateMutability": "view",
        "inputs": [{"name": "proofType", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "address[]"}],
    },
    {
        "type": "function",
        "name": "totalProofs",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ConnectionError,
)


def backoff_delay(attempt: int, base_seconds: float, cap_seconds: float = MAX_BACKOFF_SECONDS) -> float:
    """Delay before retry number `attempt` (1-based): base * 2**(attempt-1), capped."""
    return min(cap_seconds, base_seconds * (2 ** (attempt - 1)))


def attempt_timeout(total_seconds: float, max_attempts: int, backoff_base_seconds: float) -> float:
    """Per-attempt HTTP timeout that lets every attempt and backoff fit in total_seconds.

    Falls back to an even split when the backoff alone would use up the budget.
    """
    backoff = sum(backoff_delay(n, backoff_base_seconds) for n in range(1, max_attempts))
    remaining = total_seconds - backoff
    if remaining <= 0:
        return total_seconds / max_attempts
    return remaining / max_attempts


class Web3ProofRegistry:
    """ProofRegistryContractPort backed by a live RPC endpoint.

    Example:
        async with Web3ProofRegistry.from_config(config) as contract:
            ids = await contract.get_proof_ids("0x...")
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        address: str,
        max_attempts: int = 3,
        backoff_base_seconds: float = 0.25,
        request_timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize adapter.

        Args:
            w3: Connected AsyncWeb3 instance.
            address: Deployed ProofRegistry address.
            max_attempts: Attempts per call, first try included.
            backoff_base_seconds: First retry delay, doubled per attempt.
            request_timeout_seconds: Reported in RpcTimeoutError when retries
                are exhausted on timeouts.
        """
        if not address:
            raise NotConfiguredError()
        self._w3 = w3
        self._contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address), abi=PROOF_REGISTRY_ABI
        )
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base_seconds
        self._request_timeout = request_timeout_seconds
        self._log = logger.bind(component="web3_adapter", contract=address.lower())

    @classmethod
    def from_config(cls, config: ReaderConfig) -> Web3ProofRegistry:
        """Build an adapter with its own HTTP provider.

        Raises:
            NotConfiguredError: If the contract address is missing.
        """
        if not config.is_configured:
            raise NotConfiguredError()
        timeout = attempt_timeout(
            config.rpc_timeout_seconds, config.rpc_max_attempts, config.rpc_backoff_base_seconds
        )
        provider = AsyncWeb3.AsyncHTTPProvider(
            config.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
            exception_retry_configuration=None,
        )
        return cls(
            AsyncWeb3(provider),
            config.proof_registry_address,
            max_attempts=config.rpc_max_attempts,
            backoff_base_seconds=config.rpc_backoff_base_seconds,
            request_timeout_seconds=timeout,
        )

    async def __aenter__(self) -> Web3ProofRegistry:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def get_proof_ids(self, subject: str) -> list[int]:
        fn = self._contract.functions.getProofs(_checksum(subject))
        return [int(i) for i in await self._with_retries("getProofs", fn.call)]

    async def get_proof(self, proof_id: int) -> ProofRecord:
        fn = self._contract.functions.getProof(proof_id)
        proof_type, subject, metadata_hash, timestamp, issuer, revoked = await self._with_retries(
            "getProof", fn.call
        )
        return ProofRecord(
            proof_type_hash=bytes(proof_type),
            subject=subject,
            metadata_hash=bytes(metadata_hash),
            timestamp=int(timestamp),
            issuer=issuer,
            revoked=bool(revoked),
        )

    async def has_proof(self, subject: str, proof_type_hash: bytes) -> bool:
        fn = self._contract.functions.hasProof(_checksum(subject), proof_type_hash)
        return bool(await self._with_retries("hasProof", fn.call))

    async def get_proofs_by_type(self, subject: str, proof_type_hash: bytes) -> list[int]:
        fn = self._contract.functions.getProofsByType(_checksum(subject), proof_type_hash)
        return [int(i) for i in await self._with_retries("getProofsByType", fn.call)]

    async def get_proof_type_holders(self, proof_type_hash: bytes) -> list[str]:
        fn = self._contract.functions.getProofTypeHolders(proof_type_hash)
        return list(await self._with_retries("getProofTypeHolders", fn.call))

    async def total_proofs(self) -> int:
        fn = self._contract.functions.totalProofs()
        return int(await self._with_retries("totalProofs", fn.call))

    async def block_number(self) -> int:
        return int(await self._with_retries("blockNumber", self._get_block_number))

    async def close(self) -> None:
        """Close the provider's HTTP session."""
        await self._w3.provider.disconnect()

    async def _get_block_number(self) -> int:
        return await self._w3.eth.block_number

    async def _with_retries(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run call, retrying transient transport failures with backoff.

        Raises:
            RpcFailureError: Contract revert, RPC error, or transport
                failures after the last attempt.
            RpcTimeoutError: The last attempt timed out.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await call()
            except ContractLogicError as exc:
                raise RpcFailureError(operation, f"{operation} reverted: {exc}") from exc
            except _TRANSIENT_ERRORS as exc:
                if attempt == self._max_attempts:
                    if isinstance(exc, asyncio.TimeoutError):
                        raise RpcTimeoutError(operation, self._request_timeout) from exc
                    raise RpcFailureError(operation, str(exc) or type(exc).__name__) from exc
                delay = backoff_delay(attempt, self._backoff_base)
                self._log.warning(
                    "rpc_retry",
                    operation=operation,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    delay_seconds=delay,
                    error_type=type(exc).__name__,
                )
                await asyncio.sleep(delay)
            except Web3Exception as exc:
                raise RpcFailureError(operation, str(exc)) from exc
        raise RpcFailureError(operation, "no attempts made")


def _checksum(address: str) -> str:
    return AsyncWeb3.to_checksum_address(address)
