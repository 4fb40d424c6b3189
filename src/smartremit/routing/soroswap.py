"""Soroswap aggregator integration.

Uses the Soroswap REST API for forex quotes on Stellar.
API docs: https://api.soroswap.finance/docs
"""

import logging
from typing import Any, Optional

import httpx

from smartremit.errors import NetworkError, UnauthorizedError, ValidationError
from smartremit.routing.base import EXACT_IN, QuoteProvider

logger = logging.getLogger(__name__)

SOROSWAP_API = "https://api.soroswap.finance"
DEFAULT_PROTOCOLS = ["soroswap", "phoenix", "aqua"]


class SoroswapClient(QuoteProvider):
    """Soroswap quote provider.

    Soroswap aggregates liquidity from Soroswap, Phoenix and Aqua pools.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = SOROSWAP_API,
        network: str = "testnet",
        protocols: Optional[list[str]] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Soroswap provider.

        Args:
            api_key: Soroswap API key (sent as bearer token)
            base_url: API base URL
            network: Network to quote on (testnet/mainnet)
            protocols: Protocols to route through
            timeout: Request timeout in seconds
            http_client: Pre-built HTTP client (created lazily otherwise)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.network = network
        self.protocols = protocols or list(DEFAULT_PROTOCOLS)
        self.timeout = timeout
        self._http_client = http_client

    @property
    def name(self) -> str:
        return "Soroswap"

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    def _get_headers(self) -> dict:
        """Get API headers."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _network_hint(self) -> str:
        if self.network == "mainnet":
            return "Please confirm that Soroswap currently has liquidity for this pair."
        return (
            "Set SOROSWAP_QUOTE_NETWORK=mainnet to fetch quotes from mainnet "
            "while contracts stay on testnet."
        )

    async def _post(self, endpoint: str, payload: dict) -> dict[str, Any]:
        """POST to the API and map failures onto application errors."""
        try:
            response = await self._get_client().post(
                f"{self.base_url}{endpoint}",
                params={"network": self.network},
                headers=self._get_headers(),
                json=payload,
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to reach Soroswap API: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(f"Failed to parse Soroswap API response: {e}") from e

        if response.is_success:
            return data

        base_message = None
        if isinstance(data, dict):
            base_message = data.get("message") or data.get("error") or data.get("details")
        message = str(base_message or f"Soroswap API request to {endpoint} failed")

        lowered = message.lower()
        if "quote failed" in lowered or "no quote" in lowered:
            message = f"{message}. {self._network_hint()}"

        logger.warning(f"Soroswap API error: {response.status_code} - {message}")

        if response.status_code in (401, 403):
            raise UnauthorizedError(
                f"{message}. Please verify the SOROSWAP_API_KEY environment variable."
            )
        if 400 <= response.status_code < 500:
            raise ValidationError(message)
        raise NetworkError(message)

    async def get_quote(
        self,
        asset_in: str,
        asset_out: str,
        amount: str,
        trade_type: str = EXACT_IN,
    ) -> dict[str, Any]:
        """Get quote from Soroswap."""
        logger.info(f"Requesting Soroswap quote: {amount} {asset_in} -> {asset_out}")
        quote = await self._post(
            "/quote",
            {
                "assetIn": asset_in,
                "assetOut": asset_out,
                "amount": amount,
                "tradeType": trade_type,
                "protocols": self.protocols,
            },
        )
        if not isinstance(quote, dict):
            raise NetworkError("Soroswap API returned an unexpected quote payload")

        logger.debug(f"Soroswap quote: {quote.get('amountIn')} -> {quote.get('amountOut')}")
        return quote

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
