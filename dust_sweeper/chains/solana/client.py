"""Solana RPC client with fallback support."""
from __future__ import annotations

import asyncio
import base64
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import COMMITMENT_LEVELS, ChainConfig
from ...errors import ConfirmationTimeoutError, TransactionRejectedError
from .transaction import Transaction

logger = logging.getLogger(__name__)


class SolanaClient:
    """Solana JSON-RPC client with automatic endpoint fallback."""

    def __init__(
        self, config: ChainConfig, poll_interval: float = 2.0
    ) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.commitment = config.commitment
        self.poll_interval = poll_interval
        self.current_rpc_index = 0

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json(content_type=None)
                        if not isinstance(result, dict):
                            raise RuntimeError(f"Malformed RPC response: {result!r}")
                        if "error" in result:
                            raise RuntimeError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed (%s): %s", rpc_url, method, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def get_parsed_token_accounts_by_owner(
        self, owner: str, program_id: str
    ) -> list[dict[str, Any]]:
        """List the owner's token accounts under ``program_id`` in jsonParsed form.

        Errors propagate: an empty list always means the wallet has no accounts.
        """
        result = await self.rpc_call(
            "getTokenAccountsByOwner",
            [
                owner,
                {"programId": program_id},
                {"encoding": "jsonParsed", "commitment": self.commitment},
            ],
        )
        if not isinstance(result, dict):
            raise RuntimeError(f"Unexpected getTokenAccountsByOwner result: {result!r}")
        return list(result.get("value") or [])

    def deserialize_transaction(self, raw: bytes) -> Transaction:
        return Transaction.from_bytes(raw)

    async def send_raw_transaction(self, raw: bytes) -> str:
        """Submit a signed transaction; returns its signature."""
        encoded = base64.b64encode(raw).decode("ascii")
        signature = await self.rpc_call(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "skipPreflight": False,
                    "preflightCommitment": self.commitment,
                },
            ],
        )
        if not isinstance(signature, str) or not signature:
            raise RuntimeError(f"sendTransaction returned no signature: {signature!r}")
        return signature

    async def get_signature_statuses(
        self, signatures: list[str]
    ) -> list[dict[str, Any] | None]:
        result = await self.rpc_call(
            "getSignatureStatuses",
            [signatures, {"searchTransactionHistory": False}],
        )
        if not isinstance(result, dict):
            return [None] * len(signatures)
        return list(result.get("value") or [None] * len(signatures))

    def _reached_commitment(self, status: dict[str, Any]) -> bool:
        reached = status.get("confirmationStatus")
        if reached not in COMMITMENT_LEVELS:
            # Nodes omit confirmationStatus once a transaction is rooted
            return status.get("confirmations") is None
        return COMMITMENT_LEVELS.index(reached) >= COMMITMENT_LEVELS.index(
            self.commitment
        )

    async def _wait_for_status(self, signature: str) -> str:
        while True:
            try:
                statuses = await self.get_signature_statuses([signature])
            except RuntimeError as e:
                logger.warning("Status poll for %s failed: %s", signature, e)
                statuses = [None]

            status = statuses[0] if statuses else None
            if status:
                if status.get("err") is not None:
                    raise TransactionRejectedError(signature, status["err"])
                if self._reached_commitment(status):
                    return status.get("confirmationStatus") or "finalized"

            await asyncio.sleep(self.poll_interval)

    async def confirm_transaction(
        self, signature: str, timeout: float | None = None
    ) -> str:
        """Block until ``signature`` reaches the configured commitment.

        Returns the confirmation status reached. Raises
        TransactionRejectedError if the chain reports an error and
        ConfirmationTimeoutError if ``timeout`` seconds pass first.
        """
        try:
            if timeout is None:
                return await self._wait_for_status(signature)
            return await asyncio.wait_for(self._wait_for_status(signature), timeout)
        except asyncio.TimeoutError:
            raise ConfirmationTimeoutError(signature, timeout or 0.0) from None
