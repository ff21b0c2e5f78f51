"""Jupiter quote and swap-build client."""
from __future__ import annotations

import base64
import binascii
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import AggregatorConfig
from ..errors import QuoteError, SwapBuildError

logger = logging.getLogger(__name__)


class JupiterClient:
    """Fetch routes from the Jupiter quote API and prebuilt swap transactions."""

    def __init__(self, config: AggregatorConfig) -> None:
        self.quote_url = config.quote_url
        self.swap_url = config.swap_url
        self.timeout = config.timeout

    def _session(self) -> aiohttp.ClientSession:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        return aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    @staticmethod
    async def _read_json(response: aiohttp.ClientResponse) -> Any:
        try:
            return await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError) as e:
            raise ValueError(f"invalid JSON body: {e}") from e

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        fee_bps: int | None = None,
    ) -> dict[str, Any]:
        """Request a route for swapping ``amount`` minor units of ``input_mint``.

        The returned route always carries an integer ``outAmount``.
        """
        if amount <= 0:
            raise QuoteError(f"Cannot quote non-positive amount {amount} for {input_mint}")

        params: dict[str, Any] = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
        }
        if fee_bps is not None:
            params["feeBps"] = str(fee_bps)

        try:
            async with self._session() as session:
                async with session.get(self.quote_url, params=params) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise QuoteError(
                            f"Quote for {input_mint} failed: HTTP {response.status} {body[:200]}",
                            response.status,
                        )
                    route = await self._read_json(response)
        except QuoteError:
            raise
        except Exception as e:
            raise QuoteError(f"Quote for {input_mint} failed: {e}") from e

        if not isinstance(route, dict) or "outAmount" not in route:
            raise QuoteError(f"Quote for {input_mint} has no outAmount")
        try:
            route["outAmount"] = int(route["outAmount"])
        except (TypeError, ValueError):
            raise QuoteError(
                f"Quote for {input_mint} has invalid outAmount {route['outAmount']!r}"
            ) from None

        logger.debug(
            "Quote %s -> %s amount=%d out=%d", input_mint, output_mint, amount,
            route["outAmount"],
        )
        return route

    async def build_swap_transaction(
        self,
        route: dict[str, Any],
        user_public_key: str,
        fee_account: str,
        wrap_unwrap_sol: bool = True,
    ) -> bytes:
        """Ask the swap service for a serialized, unsigned transaction."""
        payload = {
            "route": route,
            "userPublicKey": user_public_key,
            "wrapUnwrapSOL": wrap_unwrap_sol,
            "feeAccount": fee_account,
        }

        try:
            async with self._session() as session:
                async with session.post(self.swap_url, json=payload) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise SwapBuildError(
                            f"Swap build failed: HTTP {response.status} {body[:200]}",
                            response.status,
                        )
                    data = await self._read_json(response)
        except SwapBuildError:
            raise
        except Exception as e:
            raise SwapBuildError(f"Swap build failed: {e}") from e

        encoded = data.get("swapTransaction") if isinstance(data, dict) else None
        if not isinstance(encoded, str) or not encoded:
            raise SwapBuildError("Swap response has no swapTransaction")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SwapBuildError(f"swapTransaction is not valid base64: {e}") from e
