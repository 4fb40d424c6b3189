"""Soroban RPC client.

Single point of contact with the ledger: account lookup, transaction build,
prepare (simulation for fees/footprint), read-only simulation and submit.
Every failure surfaces as NetworkError or TransactionError.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Optional

from stellar_sdk import Account, SorobanServerAsync, TransactionBuilder, TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr

from smartremit.errors import AppError, NetworkError, TransactionError
from smartremit.signing.base import TransactionSigner

logger = logging.getLogger(__name__)

DEFAULT_BASE_FEE = 60000
DEFAULT_TX_TIMEOUT = 120


@dataclass(frozen=True)
class ContractCall:
    """A single contract invocation."""

    contract_id: str
    function_name: str
    parameters: list[stellar_xdr.SCVal] = field(default_factory=list)


@dataclass(frozen=True)
class SubmitResult:
    """A submission accepted by the RPC endpoint."""

    hash: str
    status: str


class NetworkClient:
    """Client for one Soroban RPC endpoint and one signing credential.

    Both are fixed at construction. Account sequence numbers are fetched
    fresh for every transaction, so concurrent writes never share state.
    """

    def __init__(
        self,
        rpc_url: str,
        network_passphrase: str,
        signer: TransactionSigner,
        base_fee: int = DEFAULT_BASE_FEE,
        tx_timeout: int = DEFAULT_TX_TIMEOUT,
        rpc_timeout: Optional[float] = 30.0,
        server: Optional[SorobanServerAsync] = None,
    ):
        """Initialize network client.

        Args:
            rpc_url: Soroban RPC URL
            network_passphrase: Passphrase of the target network
            signer: Admin signing backend
            base_fee: Base fee in stroops for every transaction
            tx_timeout: Validity window of built transactions in seconds
            rpc_timeout: Per-call timeout in seconds (None = no limit)
            server: Pre-built RPC server (created lazily otherwise)
        """
        self.rpc_url = rpc_url
        self.network_passphrase = network_passphrase
        self.signer = signer
        self.base_fee = base_fee
        self.tx_timeout = tx_timeout
        self.rpc_timeout = rpc_timeout
        self._server = server

        logger.info(
            f"Initialized network client for {rpc_url} with admin {signer.public_key}"
        )

    @property
    def admin_public_key(self) -> str:
        return self.signer.public_key

    def _get_server(self) -> SorobanServerAsync:
        """Get or create the RPC server."""
        if self._server is None:
            self._server = SorobanServerAsync(self.rpc_url)
        return self._server

    async def _rpc(self, description: str, call: Awaitable[Any]) -> Any:
        """Await an RPC call, mapping timeouts and transport errors."""
        try:
            return await asyncio.wait_for(call, timeout=self.rpc_timeout)
        except AppError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Failed to {description}: timed out after {self.rpc_timeout}s"
            ) from e
        except Exception as e:
            raise NetworkError(f"Failed to {description}: {e}") from e

    async def get_account_sequence(self, public_key: str) -> Account:
        """Fetch an account with its current sequence number."""
        return await self._rpc(
            f"fetch account {public_key}", self._get_server().load_account(public_key)
        )

    async def build_invocation(self, call: ContractCall) -> TransactionEnvelope:
        """Build an unsigned transaction carrying one contract call.

        The admin account is the transaction source.
        """
        source = await self.get_account_sequence(self.admin_public_key)
        return (
            TransactionBuilder(
                source_account=source,
                network_passphrase=self.network_passphrase,
                base_fee=self.base_fee,
            )
            .append_invoke_contract_function_op(
                contract_id=call.contract_id,
                function_name=call.function_name,
                parameters=call.parameters,
            )
            .set_timeout(self.tx_timeout)
            .build()
        )

    async def prepare_transaction(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        """Simulate to attach resource fees and footprint."""
        return await self._rpc(
            "prepare transaction", self._get_server().prepare_transaction(envelope)
        )

    async def simulate_transaction(
        self, envelope: TransactionEnvelope
    ) -> Optional[stellar_xdr.SCVal]:
        """Run a read-only simulation and return the call's return value.

        Returns:
            The returned SCVal, or None if the simulation produced no result

        Raises:
            NetworkError: On transport failure or a simulation error
        """
        response = await self._rpc(
            "simulate transaction", self._get_server().simulate_transaction(envelope)
        )

        if response.error:
            raise NetworkError(f"Simulation failed: {response.error}")

        if not response.results:
            return None

        return stellar_xdr.SCVal.from_xdr(response.results[0].xdr)

    def sign(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        """Sign with the admin credential."""
        return self.signer.sign(envelope)

    async def submit_transaction(self, envelope: TransactionEnvelope) -> SubmitResult:
        """Submit a signed transaction.

        An error result is a NetworkError. A response without a hash, or one
        the endpoint asks to retry, is a TransactionError: the transaction
        may or may not have been applied.
        """
        response = await self._rpc(
            "send transaction", self._get_server().send_transaction(envelope)
        )
        status = str(getattr(response.status, "value", response.status))

        if status == "ERROR" or response.error_result_xdr:
            raise NetworkError(
                f"Transaction failed: {response.error_result_xdr or 'Unknown error'}"
            )

        if not response.hash:
            raise TransactionError("Transaction submitted but no hash was returned; outcome unknown")

        if status == "TRY_AGAIN_LATER":
            raise TransactionError(
                f"Transaction {response.hash} was not accepted (TRY_AGAIN_LATER); outcome unknown",
                tx_hash=response.hash,
            )

        logger.info(f"Submitted transaction {response.hash} ({status})")
        return SubmitResult(hash=response.hash, status=status)

    async def close(self) -> None:
        """Close the underlying RPC session."""
        if self._server is not None:
            await self._server.close()
            self._server = None
