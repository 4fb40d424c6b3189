"""Tests for the transaction orchestrator."""

import pytest

from conftest import EXPLORER, FakeNetworkClient, call_args
from smartremit.accounts import MULTISIG, AccountDirectory, AccountLabel
from smartremit.errors import NetworkError, TransactionError, ValidationError
from smartremit.models import ForexDirection
from smartremit.services.transactions import TransactionOrchestrator


@pytest.fixture
def orchestrator(fake_client, directory):
    return TransactionOrchestrator(fake_client, directory, EXPLORER)


class TestTransfer:
    """Tests for account-to-account transfers."""

    @pytest.mark.asyncio
    async def test_transfer_call_shape(self, orchestrator, fake_client, addresses):
        """Transfers call execute_transfer on the source account."""
        result = await orchestrator.submit_transfer(AccountLabel.A, AccountLabel.B, "12.5")

        call = fake_client.built[0]
        assert call.contract_id == addresses["A"]
        assert call.function_name == "execute_transfer"
        assert call_args(call) == [addresses["B"], 125_000_000]

        assert result.hash == "abc123"
        assert result.explorer_url == f"{EXPLORER}abc123"

    @pytest.mark.asyncio
    async def test_full_pipeline(self, orchestrator, fake_client):
        """Each transfer is prepared, signed and submitted once."""
        await orchestrator.submit_transfer(AccountLabel.C, AccountLabel.D, "1")

        assert len(fake_client.prepared) == 1
        assert len(fake_client.signed) == 1
        assert len(fake_client.submitted) == 1

    @pytest.mark.asyncio
    async def test_transfer_to_treasury(self, orchestrator, fake_client, multisig_address):
        """MULTISIG resolves to the treasury contract."""
        await orchestrator.submit_transfer(AccountLabel.A, MULTISIG, "5")

        assert call_args(fake_client.built[0]) == [multisig_address, 50_000_000]

    @pytest.mark.asyncio
    async def test_same_account_rejected(self, orchestrator, fake_client):
        """Source and destination must differ; nothing is built."""
        with pytest.raises(ValidationError, match="different"):
            await orchestrator.submit_transfer(AccountLabel.A, AccountLabel.A, "1")

        assert fake_client.built == []

    @pytest.mark.asyncio
    async def test_missing_contract_fails_before_io(self, fake_client, addresses):
        """An unconfigured account fails with ValidationError before any I/O."""
        directory = AccountDirectory(dict(addresses, B=""))
        orchestrator = TransactionOrchestrator(fake_client, directory, EXPLORER)

        with pytest.raises(ValidationError, match="account B"):
            await orchestrator.submit_transfer(AccountLabel.A, AccountLabel.B, "1")

        assert fake_client.built == []


class TestAdminWithdraw:
    """Tests for admin withdrawals."""

    @pytest.mark.asyncio
    async def test_call_shape(self, orchestrator, fake_client, addresses):
        """Admin withdraw passes only the amount."""
        await orchestrator.submit_admin_withdraw(AccountLabel.C, "0.0000001")

        call = fake_client.built[0]
        assert call.contract_id == addresses["C"]
        assert call.function_name == "admin_withdraw"
        assert call_args(call) == [1]


class TestForexTransfer:
    """Tests for forex swap transfers."""

    @pytest.mark.asyncio
    async def test_usdc_to_eurc(self, orchestrator, fake_client, addresses):
        """USDC -> EURC swaps to the counter asset."""
        await orchestrator.submit_forex_transfer(
            AccountLabel.A, AccountLabel.B, ForexDirection.USDC_TO_EURC, "10", "9.2", 1_700_000_300
        )

        call = fake_client.built[0]
        assert call.contract_id == addresses["A"]
        assert call.function_name == "execute_forex_transfer"
        assert call_args(call) == [addresses["B"], 100_000_000, 92_000_000, 1_700_000_300, True]

    @pytest.mark.asyncio
    async def test_eurc_to_usdc(self, orchestrator, fake_client, addresses):
        """EURC -> USDC does not swap to the counter asset."""
        await orchestrator.submit_forex_transfer(
            AccountLabel.B, AccountLabel.A, ForexDirection.EURC_TO_USDC, "9.2", "10", 1
        )

        call = fake_client.built[0]
        assert call.contract_id == addresses["B"]
        assert call_args(call)[-1] is False


class TestMultisig:
    """Tests for treasury withdrawal proposals and approvals."""

    @pytest.mark.asyncio
    async def test_withdraw_call_shape(self, orchestrator, fake_client, addresses, multisig_address):
        """Proposals are sent from the initiator with the treasury address."""
        await orchestrator.submit_multisig_withdraw(AccountLabel.B, AccountLabel.D, "3")

        call = fake_client.built[0]
        assert call.contract_id == addresses["B"]
        assert call.function_name == "initiate_multisig_withdraw"
        assert call_args(call) == [multisig_address, addresses["D"], 30_000_000]

    @pytest.mark.asyncio
    async def test_approval_call_shape(self, orchestrator, fake_client, addresses, multisig_address):
        """Approvals pass the treasury address and a u32 request ID."""
        await orchestrator.submit_multisig_approval(AccountLabel.C, 7)

        call = fake_client.built[0]
        assert call.contract_id == addresses["C"]
        assert call.function_name == "approve_multisig_withdraw"
        assert call_args(call) == [multisig_address, 7]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_id", [-1, True, "3", 1.5])
    async def test_invalid_request_id(self, orchestrator, fake_client, request_id):
        """Request IDs must be non-negative integers."""
        with pytest.raises(ValidationError, match="requestId"):
            await orchestrator.submit_multisig_approval(AccountLabel.A, request_id)

        assert fake_client.built == []


class TestErrorMapping:
    """Tests for pipeline error handling."""

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self, orchestrator, fake_client):
        """Network failures become TransactionError with the operation name."""
        fake_client.prepare_error = NetworkError("rpc down")

        with pytest.raises(TransactionError, match="Transfer failed: rpc down") as exc_info:
            await orchestrator.submit_transfer(AccountLabel.A, AccountLabel.B, "1")

        assert isinstance(exc_info.value.__cause__, NetworkError)
        assert fake_client.submitted == []

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, orchestrator, fake_client):
        """Any other failure is wrapped the same way."""
        fake_client.submit_error = RuntimeError("boom")

        with pytest.raises(TransactionError, match="Admin withdraw failed: boom"):
            await orchestrator.submit_admin_withdraw(AccountLabel.A, "1")

    @pytest.mark.asyncio
    async def test_transaction_error_passes_through(self, orchestrator, fake_client):
        """A TransactionError from submit is raised unchanged."""
        error = TransactionError("outcome unknown", tx_hash="deadbeef")
        fake_client.submit_error = error

        with pytest.raises(TransactionError) as exc_info:
            await orchestrator.submit_transfer(AccountLabel.A, AccountLabel.B, "1")

        assert exc_info.value is error
        assert exc_info.value.tx_hash == "deadbeef"


class TestArgumentRanges:
    """Out-of-range arguments are rejected before any I/O."""

    @pytest.mark.asyncio
    async def test_request_id_above_u32(self, orchestrator, fake_client):
        """Request IDs must fit in a u32."""
        with pytest.raises(ValidationError, match="between 0 and 4294967295"):
            await orchestrator.submit_multisig_approval(AccountLabel.A, 2**32)

        assert fake_client.built == []

    @pytest.mark.asyncio
    async def test_largest_request_id(self, orchestrator, fake_client, multisig_address):
        """The largest u32 is accepted."""
        await orchestrator.submit_multisig_approval(AccountLabel.A, 2**32 - 1)

        assert call_args(fake_client.built[0]) == [multisig_address, 2**32 - 1]

    @pytest.mark.asyncio
    async def test_amount_above_i128(self, orchestrator, fake_client):
        """Amounts beyond the i128 range are a ValidationError."""
        with pytest.raises(ValidationError, match="out of range"):
            await orchestrator.submit_forex_transfer(
                AccountLabel.A, AccountLabel.B, ForexDirection.USDC_TO_EURC, "9" * 45, "1", 1
            )

        assert fake_client.built == []
