"""Transaction orchestration for smart account contract calls.

Flow for every write:
1. Resolve labels to contract addresses (fails fast, before any I/O)
2. Build a transaction from the admin account's current sequence
3. Prepare (simulate for fees and footprint)
4. Sign with the admin credential
5. Submit and map the hash into a TransactionResult

The orchestrator relays calls; the smart account contracts enforce their own
authorization.
"""

import logging

from stellar_sdk import scval

from smartremit.accounts import MULTISIG, AccountDirectory, AccountLabel, TransferDestination
from smartremit.chain.client import ContractCall, NetworkClient
from smartremit.currency import to_fixed_point
from smartremit.errors import TransactionError, ValidationError
from smartremit.models import ForexDirection, TransactionResult

logger = logging.getLogger(__name__)

U32_MAX = 2**32 - 1


class TransactionOrchestrator:
    """Builds, signs and submits the five smart account call shapes."""

    def __init__(
        self,
        client: NetworkClient,
        directory: AccountDirectory,
        explorer_base_url: str,
    ):
        self.client = client
        self.directory = directory
        self.explorer_base_url = explorer_base_url

    def explorer_url(self, tx_hash: str) -> str:
        return f"{self.explorer_base_url}{tx_hash}"

    async def _execute(self, call: ContractCall, operation: str) -> TransactionResult:
        """Run one contract call through prepare, sign and submit.

        TransactionError and ValidationError pass through unchanged; any
        other failure is wrapped once with the operation name.
        """
        try:
            envelope = await self.client.build_invocation(call)
            envelope = await self.client.prepare_transaction(envelope)
            self.client.sign(envelope)
            submitted = await self.client.submit_transaction(envelope)
        except (TransactionError, ValidationError):
            raise
        except Exception as e:
            raise TransactionError(f"{operation} failed: {e}") from e

        logger.info(f"{operation} submitted: {submitted.hash}")
        return TransactionResult(hash=submitted.hash, explorer_url=self.explorer_url(submitted.hash))

    async def submit_transfer(
        self,
        from_label: AccountLabel,
        to: TransferDestination,
        amount: str,
    ) -> TransactionResult:
        """Transfer from one smart account to another account or the treasury."""
        if from_label == to:
            raise ValidationError("Source and destination accounts must be different")

        call = ContractCall(
            contract_id=self.directory.address_of(from_label),
            function_name="execute_transfer",
            parameters=[
                scval.to_address(self.directory.resolve_destination(to)),
                scval.to_int128(to_fixed_point(amount)),
            ],
        )
        return await self._execute(call, "Transfer")

    async def submit_admin_withdraw(self, from_label: AccountLabel, amount: str) -> TransactionResult:
        """Withdraw from a smart account to the admin.

        The admin token is verified by the API layer before this is called.
        """
        call = ContractCall(
            contract_id=self.directory.address_of(from_label),
            function_name="admin_withdraw",
            parameters=[scval.to_int128(to_fixed_point(amount))],
        )
        return await self._execute(call, "Admin withdraw")

    async def submit_forex_transfer(
        self,
        from_label: AccountLabel,
        to_label: AccountLabel,
        direction: ForexDirection,
        amount: str,
        min_amount_out: str,
        deadline: int,
    ) -> TransactionResult:
        """Swap and transfer between the two forex accounts.

        Args:
            from_label: Account paying the input asset
            to_label: Account receiving the output asset
            direction: Swap direction
            amount: Input amount (decimal string)
            min_amount_out: Minimum accepted output (decimal string)
            deadline: Absolute unix timestamp after which the swap fails
        """
        swap_to_counter = ForexDirection(direction) == ForexDirection.USDC_TO_EURC
        call = ContractCall(
            contract_id=self.directory.address_of(from_label),
            function_name="execute_forex_transfer",
            parameters=[
                scval.to_address(self.directory.address_of(to_label)),
                scval.to_int128(to_fixed_point(amount)),
                scval.to_int128(to_fixed_point(min_amount_out)),
                scval.to_uint64(int(deadline)),
                scval.to_bool(swap_to_counter),
            ],
        )
        return await self._execute(call, "Forex transfer")

    async def submit_multisig_withdraw(
        self,
        initiator: AccountLabel,
        to: AccountLabel,
        amount: str,
    ) -> TransactionResult:
        """Propose a treasury withdrawal on behalf of a signer account."""
        call = ContractCall(
            contract_id=self.directory.address_of(initiator),
            function_name="initiate_multisig_withdraw",
            parameters=[
                scval.to_address(self.directory.resolve_destination(MULTISIG)),
                scval.to_address(self.directory.address_of(to)),
                scval.to_int128(to_fixed_point(amount)),
            ],
        )
        return await self._execute(call, "Multisig withdraw")

    async def submit_multisig_approval(self, signer: AccountLabel, request_id: int) -> TransactionResult:
        """Approve a pending treasury withdrawal."""
        if isinstance(request_id, bool) or not isinstance(request_id, int):
            raise ValidationError("requestId must be a non-negative integer")
        if not 0 <= request_id <= U32_MAX:
            raise ValidationError(f"requestId must be between 0 and {U32_MAX}")

        call = ContractCall(
            contract_id=self.directory.address_of(signer),
            function_name="approve_multisig_withdraw",
            parameters=[
                scval.to_address(self.directory.resolve_destination(MULTISIG)),
                scval.to_uint32(request_id),
            ],
        )
        return await self._execute(call, "Multisig approval")
