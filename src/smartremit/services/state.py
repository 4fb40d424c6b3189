"""Read-side reconciliation of on-chain state.

Balances and treasury requests are read through simulation only; nothing here
submits a transaction. Reads are best-effort: a failed account balance is
reported as "0" (and logged) rather than failing the whole dashboard.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from stellar_sdk import scval

from smartremit.accounts import MULTISIG, AccountDirectory, AccountLabel
from smartremit.chain.client import ContractCall, NetworkClient
from smartremit.chain.scval import to_native
from smartremit.currency import from_fixed_point
from smartremit.errors import BalanceFetchError
from smartremit.models import (
    BalanceReading,
    ForexBalance,
    ForexBalanceMap,
    ForexPair,
    MultisigRequestRecord,
    MultisigState,
)
from smartremit.services.snapshots import decode_requests

logger = logging.getLogger(__name__)

DegradedHook = Callable[[BalanceReading], None]


def log_degraded(reading: BalanceReading) -> None:
    """Default degradation hook: log and move on."""
    logger.warning(
        f"Balance for {reading.label} unavailable, reporting 0: "
        f"{type(reading.error).__name__}: {reading.error}"
    )


class StateReconciler:
    """Reconstructs balances and multisig state from simulated contract reads."""

    def __init__(
        self,
        client: NetworkClient,
        directory: AccountDirectory,
        usdc_contract_id: str,
        forex: Optional[ForexPair] = None,
        multisig_label: str = "Treasury Multisig",
        multisig_threshold: int = 3,
        multisig_signers: Optional[list[AccountLabel]] = None,
        on_degraded: Optional[DegradedHook] = None,
    ):
        self.client = client
        self.directory = directory
        self.usdc_contract_id = usdc_contract_id
        self.forex = forex
        self.multisig_label = multisig_label
        self.multisig_threshold = multisig_threshold
        self.multisig_signers = tuple(multisig_signers or list(AccountLabel))
        self.on_degraded = on_degraded or log_degraded

    async def _read(self, call: ContractCall) -> Any:
        """Simulate a contract call and return its value as Python primitives."""
        envelope = await self.client.build_invocation(call)
        return to_native(await self.client.simulate_transaction(envelope))

    def _degraded(self, name: str, error: BaseException) -> BalanceReading:
        reading = BalanceReading(label=name, error=error)
        self.on_degraded(reading)
        return reading

    async def read_balance(self, name: str, token_contract: str, address: str) -> BalanceReading:
        """Read one token balance; failures come back as a degraded reading."""
        try:
            value = await self._read(
                ContractCall(
                    contract_id=token_contract,
                    function_name="balance",
                    parameters=[scval.to_address(address)],
                )
            )
            amount = from_fixed_point(int(value)) if value is not None else "0"
        except Exception as e:
            return self._degraded(name, e)
        return BalanceReading(label=name, amount=amount)

    async def read_account_balance(self, label: AccountLabel, token_contract: str) -> BalanceReading:
        try:
            address = self.directory.address_of(label)
        except Exception as e:
            return self._degraded(label.value, e)
        return await self.read_balance(label.value, token_contract, address)

    async def fetch_balance_readings(self) -> dict[AccountLabel, BalanceReading]:
        """Fetch every account's USDC balance concurrently.

        Raises:
            BalanceFetchError: If the aggregation itself fails
        """
        labels = self.directory.labels
        try:
            readings = await asyncio.gather(
                *(self.read_account_balance(label, self.usdc_contract_id) for label in labels)
            )
        except Exception as e:
            raise BalanceFetchError(
                f"Failed to fetch balances: {e}",
                failed_accounts=[label.value for label in labels],
            ) from e
        return dict(zip(labels, readings))

    async def fetch_balances(self) -> dict[str, str]:
        """Fetch balances for all accounts as decimal strings."""
        readings = await self.fetch_balance_readings()
        return {label.value: reading.display for label, reading in readings.items()}

    async def fetch_forex_balances(self) -> ForexBalanceMap:
        """Fetch the USDC (New York) and EURC (London) leg balances."""
        if self.forex is None:
            raise BalanceFetchError("Forex accounts are not configured")

        usdc_account = self.forex.usdc_account
        eurc_account = self.forex.eurc_account
        try:
            usdc, eurc = await asyncio.gather(
                self.read_account_balance(usdc_account, self.forex.usdc_contract_id),
                self.read_account_balance(eurc_account, self.forex.eurc_contract_id),
            )
        except Exception as e:
            raise BalanceFetchError(
                f"Failed to fetch forex balances: {e}",
                failed_accounts=[usdc_account.value, eurc_account.value],
            ) from e

        return ForexBalanceMap(
            new_york=ForexBalance(
                account=usdc_account, city="New York", asset="USDC", balance=usdc.display
            ),
            london=ForexBalance(
                account=eurc_account, city="London", asset="EURC", balance=eurc.display
            ),
        )

    async def fetch_requests(self) -> list[MultisigRequestRecord]:
        """Fetch and decode treasury requests; an empty list on failure."""
        try:
            entries = await self._read(
                ContractCall(
                    contract_id=self.directory.resolve_destination(MULTISIG),
                    function_name="list_requests",
                )
            )
        except Exception as e:
            logger.warning(f"Failed to fetch multisig requests: {type(e).__name__}: {e}")
            return []
        return decode_requests(entries, self.directory)

    async def fetch_multisig_state(self) -> MultisigState:
        """Assemble the treasury state from a concurrent balance and request read."""
        try:
            balance, requests = await asyncio.gather(
                self._treasury_balance(), self.fetch_requests()
            )
        except Exception as e:
            raise BalanceFetchError(f"Failed to fetch multisig state: {e}") from e

        return MultisigState(
            balance=balance.display,
            label=self.multisig_label,
            threshold=self.multisig_threshold,
            signers=self.multisig_signers,
            requests=tuple(requests),
        )

    async def _treasury_balance(self) -> BalanceReading:
        try:
            address = self.directory.resolve_destination(MULTISIG)
        except Exception as e:
            return self._degraded(MULTISIG, e)
        return await self.read_balance(MULTISIG, self.usdc_contract_id, address)
