"""Request contracts for the HTTP API."""

import re
from decimal import Decimal
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from smartremit.accounts import AccountLabel
from smartremit.currency import DECIMALS
from smartremit.models import ForexDirection
from smartremit.services.transactions import U32_MAX

AMOUNT_RE = re.compile(r"^\d+(\.\d+)?$")
MAX_AMOUNT = Decimal("1e15")


def validate_amount(amount: Any) -> str:
    """Validate a positive decimal amount string."""
    if not isinstance(amount, str):
        raise ValueError("Amount must be a string")
    if amount.strip() == "":
        raise ValueError("Amount cannot be empty")
    if not AMOUNT_RE.match(amount):
        raise ValueError("Amount must be a valid positive number (e.g., '1.5', '100', '0.01')")

    value = Decimal(amount)
    if value <= 0:
        raise ValueError("Amount must be greater than zero")
    if value > MAX_AMOUNT:
        raise ValueError("Amount is too large")

    _, _, fraction = amount.partition(".")
    if len(fraction) > DECIMALS:
        raise ValueError(f"Amount cannot have more than {DECIMALS} decimal places")
    return amount


class _AmountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Any = Field(..., description="Decimal amount, e.g. '12.5'")

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: Any) -> str:
        return validate_amount(value)


class TransferRequest(_AmountRequest):
    """Transfer between smart accounts (or into the treasury)."""

    from_: AccountLabel = Field(..., alias="from", description="Source account")
    to: Union[AccountLabel, Literal["MULTISIG"]] = Field(..., description="Destination")


class AdminWithdrawRequest(_AmountRequest):
    """Admin withdrawal from a smart account."""

    from_: AccountLabel = Field(..., alias="from", description="Source account")


class MultisigWithdrawRequest(_AmountRequest):
    """Proposal of a treasury withdrawal."""

    initiator: AccountLabel = Field(..., description="Signer proposing the withdrawal")
    to: AccountLabel = Field(..., description="Destination account")


class MultisigApprovalRequest(BaseModel):
    """Approval of a pending treasury withdrawal."""

    model_config = ConfigDict(populate_by_name=True)

    signer: AccountLabel = Field(..., description="Approving signer")
    request_id: StrictInt = Field(..., ge=0, le=U32_MAX, alias="requestId", description="Request ID")


class ForexQuoteRequest(_AmountRequest):
    """Quote request for a forex swap."""

    direction: ForexDirection = Field(..., description="USDC_TO_EURC or EURC_TO_USDC")


class ForexSwapRequest(BaseModel):
    """Execution of a previously returned quote."""

    quote: dict[str, Any] = Field(..., description="Quote payload, replayed unmodified")
