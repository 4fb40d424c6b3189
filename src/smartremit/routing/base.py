"""Abstract interface for external price-quote providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

EXACT_IN = "EXACT_IN"
EXACT_OUT = "EXACT_OUT"


class QuoteProvider(ABC):
    """Abstract base class for quote providers.

    Quotes are returned as the provider's raw payload. They are opaque to the
    rest of the system and must be replayed unmodified when executing a swap.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def get_quote(
        self,
        asset_in: str,
        asset_out: str,
        amount: str,
        trade_type: str = EXACT_IN,
    ) -> dict[str, Any]:
        """
        Get a swap quote.

        Args:
            asset_in: Contract ID of the asset sold
            asset_out: Contract ID of the asset bought
            amount: Amount in fixed-point units (integer string)
            trade_type: EXACT_IN or EXACT_OUT

        Returns:
            Provider quote payload (amountIn, amountOut, assetIn, assetOut, ...)

        Raises:
            NetworkError: Provider unreachable or response unparseable
            UnauthorizedError: Provider rejected our credentials
            ValidationError: Provider rejected the request
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
