"""Value types returned to the API layer.

All of these are immutable snapshots; every fetch builds fresh instances.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from smartremit.accounts import AccountLabel


class ForexDirection(str, Enum):
    """Supported forex swap directions."""

    USDC_TO_EURC = "USDC_TO_EURC"
    EURC_TO_USDC = "EURC_TO_USDC"


@dataclass(frozen=True)
class ForexPair:
    """Token contracts and accounts for the two forex legs."""

    usdc_contract_id: str
    eurc_contract_id: str
    usdc_account: AccountLabel
    eurc_account: AccountLabel

    def assets_for(self, direction: "ForexDirection") -> tuple[str, str]:
        """Get (asset_in, asset_out) for a direction."""
        if ForexDirection(direction) == ForexDirection.USDC_TO_EURC:
            return self.usdc_contract_id, self.eurc_contract_id
        return self.eurc_contract_id, self.usdc_contract_id

    def accounts_for(self, direction: "ForexDirection") -> tuple[AccountLabel, AccountLabel]:
        """Get (paying account, receiving account) for a direction."""
        if ForexDirection(direction) == ForexDirection.USDC_TO_EURC:
            return self.usdc_account, self.eurc_account
        return self.eurc_account, self.usdc_account


@dataclass(frozen=True)
class TransactionResult:
    """A submission accepted by the network."""

    hash: str
    explorer_url: str

    def to_dict(self) -> dict:
        return {"hash": self.hash, "explorerUrl": self.explorer_url}


@dataclass(frozen=True)
class BalanceReading:
    """Balance of one account, or the error that prevented reading it.

    A degraded reading serializes as "0" but keeps its error for logging.
    """

    label: str
    amount: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def is_degraded(self) -> bool:
        return self.amount is None

    @property
    def display(self) -> str:
        return self.amount if self.amount is not None else "0"


@dataclass(frozen=True)
class MultisigRequestRecord:
    """One withdrawal request held by the treasury contract."""

    id: int
    to: AccountLabel
    amount: str
    approvals: tuple[AccountLabel, ...]
    executed: bool
    initiator: AccountLabel
    created_at: int
    completed_at: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "to": self.to.value,
            "amount": self.amount,
            "approvals": [label.value for label in self.approvals],
            "executed": self.executed,
            "initiator": self.initiator.value,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        return data


@dataclass(frozen=True)
class MultisigState:
    """Live reconstruction of the treasury: balance, signers and requests."""

    balance: str
    label: str
    threshold: int
    signers: tuple[AccountLabel, ...]
    requests: tuple[MultisigRequestRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "balance": self.balance,
            "label": self.label,
            "threshold": self.threshold,
            "signers": [label.value for label in self.signers],
            "requests": [request.to_dict() for request in self.requests],
        }


@dataclass(frozen=True)
class ForexBalance:
    """Balance of one forex leg."""

    account: AccountLabel
    city: str
    asset: str
    balance: str

    def to_dict(self) -> dict:
        return {
            "account": self.account.value,
            "city": self.city,
            "asset": self.asset,
            "balance": self.balance,
        }


@dataclass(frozen=True)
class ForexBalanceMap:
    new_york: ForexBalance
    london: ForexBalance

    def to_dict(self) -> dict:
        return {"newYork": self.new_york.to_dict(), "london": self.london.to_dict()}


@dataclass(frozen=True)
class ForexQuoteSummary:
    """Display summary of a provider quote.

    Only ``quote`` is authoritative for execution; the numeric fields are
    derived from it for display.
    """

    amount_in: str
    amount_out: str
    rate: str
    direction: ForexDirection
    quote_id: str
    quote: dict[str, Any] = field(default_factory=dict)
    expires_at: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "amountIn": self.amount_in,
            "amountOut": self.amount_out,
            "rate": self.rate,
            "direction": self.direction.value,
            "quoteId": self.quote_id,
            "quote": self.quote,
        }
        if self.expires_at is not None:
            data["expiresAt"] = self.expires_at
        return data
