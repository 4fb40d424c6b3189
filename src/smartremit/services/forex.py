"""Forex quotes and swaps between the USDC and EURC accounts.

The provider's quote is the only authority for execution amounts. The
summary's numbers are for display, and the swap direction is always
re-derived from the quote's own asset IDs.
"""

import logging
import time
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from smartremit.currency import from_fixed_point, to_fixed_point
from smartremit.errors import ValidationError
from smartremit.models import ForexDirection, ForexPair, ForexQuoteSummary, TransactionResult
from smartremit.routing.base import QuoteProvider
from smartremit.services.transactions import TransactionOrchestrator

logger = logging.getLogger(__name__)

SWAP_DEADLINE_SECONDS = 300


def format_rate(amount_in: str, amount_out: str) -> str:
    """Format out/in to 6 places, or "0.000000" when the input is zero."""
    try:
        in_value = Decimal(amount_in)
        out_value = Decimal(amount_out)
    except (InvalidOperation, TypeError):
        return "0.000000"

    if not in_value.is_finite() or not out_value.is_finite() or in_value == 0:
        return "0.000000"

    return f"{out_value / in_value:.6f}"


def _fixed_point_string(value: Any) -> str:
    try:
        return from_fixed_point(int(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Quote amount is not an integer: {value!r}") from None


class ForexQuoteAdapter:
    """Turns provider quotes into summaries and accepted quotes into swaps."""

    def __init__(
        self,
        provider: QuoteProvider,
        orchestrator: TransactionOrchestrator,
        pair: ForexPair,
        clock: Callable[[], float] = time.time,
    ):
        self.provider = provider
        self.orchestrator = orchestrator
        self.pair = pair
        self.clock = clock

    def direction_of(self, quote: dict[str, Any]) -> ForexDirection:
        """Infer the swap direction from the quote's asset IDs.

        Raises:
            ValidationError: If the assets match neither orientation
        """
        asset_in = quote.get("assetIn")
        asset_out = quote.get("assetOut")

        if asset_in == self.pair.usdc_contract_id and asset_out == self.pair.eurc_contract_id:
            return ForexDirection.USDC_TO_EURC
        if asset_in == self.pair.eurc_contract_id and asset_out == self.pair.usdc_contract_id:
            return ForexDirection.EURC_TO_USDC

        raise ValidationError("Quote does not match supported forex pairs")

    async def request_quote(self, direction: ForexDirection, amount: str) -> ForexQuoteSummary:
        """Request a quote for selling ``amount`` in the given direction."""
        asset_in, asset_out = self.pair.assets_for(direction)
        atomic_amount = str(to_fixed_point(amount))

        quote = await self.provider.get_quote(asset_in, asset_out, atomic_amount)

        if quote.get("amountOut") in (None, ""):
            raise ValidationError(f"{self.provider.name} quote did not return an amountOut value")

        amount_in = _fixed_point_string(quote.get("amountIn") or atomic_amount)
        amount_out = _fixed_point_string(quote["amountOut"])
        quote_direction = self.direction_of(quote)

        quote_id = quote.get("id")
        if not isinstance(quote_id, str) or not quote_id:
            quote_id = str(uuid.uuid4())

        expires_at = quote.get("expiresAt") or quote.get("expiration")

        summary = ForexQuoteSummary(
            amount_in=amount_in,
            amount_out=amount_out,
            rate=format_rate(amount_in, amount_out),
            direction=quote_direction,
            quote_id=quote_id,
            quote=quote,
            expires_at=str(expires_at) if expires_at else None,
        )
        logger.info(
            f"Forex quote {quote_id}: {amount_in} -> {amount_out} "
            f"({quote_direction.value}, rate {summary.rate})"
        )
        return summary

    async def submit_swap(self, quote: dict[str, Any]) -> TransactionResult:
        """Execute a previously returned quote as a forex transfer."""
        if not isinstance(quote, dict):
            raise ValidationError("quote payload is required to submit a forex swap")

        direction = self.direction_of(quote)
        if quote.get("amountIn") in (None, "") or quote.get("amountOut") in (None, ""):
            raise ValidationError("Quote is missing amount information")

        amount_in = _fixed_point_string(quote["amountIn"])
        min_amount_out = _fixed_point_string(quote["amountOut"])
        deadline = int(self.clock()) + SWAP_DEADLINE_SECONDS
        from_label, to_label = self.pair.accounts_for(direction)

        return await self.orchestrator.submit_forex_transfer(
            from_label, to_label, direction, amount_in, min_amount_out, deadline
        )
