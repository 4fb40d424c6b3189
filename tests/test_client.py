"""Tests for the Soroban network client."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from stellar_sdk import Account, Network, TransactionEnvelope, scval

from conftest import contract_address
from smartremit.chain.client import ContractCall, NetworkClient
from smartremit.errors import NetworkError, TransactionError
from smartremit.signing import KeypairSigner


def send_response(status="PENDING", tx_hash="abc123", error_result_xdr=None):
    return SimpleNamespace(status=status, hash=tx_hash, error_result_xdr=error_result_xdr)


@pytest.fixture
def server(admin_keypair):
    """Mocked SorobanServerAsync."""
    server = MagicMock()
    server.load_account = AsyncMock(return_value=Account(admin_keypair.public_key, 41))
    server.prepare_transaction = AsyncMock(side_effect=lambda envelope: envelope)
    server.simulate_transaction = AsyncMock()
    server.send_transaction = AsyncMock(return_value=send_response())
    server.close = AsyncMock()
    return server


@pytest.fixture
def client(admin_keypair, server):
    return NetworkClient(
        rpc_url="https://soroban-testnet.stellar.org",
        network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
        signer=KeypairSigner(admin_keypair.secret),
        server=server,
    )


@pytest.fixture
async def envelope(client):
    call = ContractCall(
        contract_id=contract_address(),
        function_name="admin_withdraw",
        parameters=[scval.to_int128(10)],
    )
    return await client.build_invocation(call)


class TestBuildInvocation:
    """Tests for transaction building."""

    @pytest.mark.asyncio
    async def test_builds_from_admin_account(self, client, server, admin_keypair, envelope):
        """The admin account is the source and its sequence is bumped."""
        server.load_account.assert_awaited_once_with(admin_keypair.public_key)

        assert isinstance(envelope, TransactionEnvelope)
        assert envelope.transaction.source.account_id == admin_keypair.public_key
        assert envelope.transaction.sequence == 42
        assert envelope.transaction.fee == 60000
        assert len(envelope.transaction.operations) == 1

    @pytest.mark.asyncio
    async def test_account_fetch_failure(self, client, server):
        """A failed account fetch is a NetworkError."""
        server.load_account.side_effect = ConnectionError("refused")

        with pytest.raises(NetworkError, match="refused"):
            await client.build_invocation(ContractCall(contract_address(), "balance"))


class TestSimulate:
    """Tests for read-only simulation."""

    @pytest.mark.asyncio
    async def test_returns_scval(self, client, server, envelope):
        """The first result's XDR is decoded into an SCVal."""
        server.simulate_transaction.return_value = SimpleNamespace(
            error=None, results=[SimpleNamespace(xdr=scval.to_int128(125).to_xdr())]
        )

        result = await client.simulate_transaction(envelope)

        assert scval.from_int128(result) == 125

    @pytest.mark.asyncio
    async def test_no_results(self, client, server, envelope):
        """A simulation without results returns None."""
        server.simulate_transaction.return_value = SimpleNamespace(error=None, results=[])

        assert await client.simulate_transaction(envelope) is None

    @pytest.mark.asyncio
    async def test_simulation_error(self, client, server, envelope):
        """A simulation error is a NetworkError."""
        server.simulate_transaction.return_value = SimpleNamespace(
            error="HostError: contract trapped", results=None
        )

        with pytest.raises(NetworkError, match="contract trapped"):
            await client.simulate_transaction(envelope)


class TestSubmit:
    """Tests for transaction submission outcomes."""

    @pytest.mark.asyncio
    async def test_pending_success(self, client, envelope):
        """A PENDING response returns the hash."""
        result = await client.submit_transaction(envelope)

        assert result.hash == "abc123"
        assert result.status == "PENDING"

    @pytest.mark.asyncio
    async def test_enum_status(self, client, server, envelope):
        """Enum statuses are compared by value."""
        server.send_transaction.return_value = send_response(
            status=SimpleNamespace(value="DUPLICATE")
        )

        result = await client.submit_transaction(envelope)

        assert result.status == "DUPLICATE"

    @pytest.mark.asyncio
    async def test_error_status(self, client, server, envelope):
        """An ERROR status is a NetworkError."""
        server.send_transaction.return_value = send_response(status="ERROR")

        with pytest.raises(NetworkError, match="Unknown error"):
            await client.submit_transaction(envelope)

    @pytest.mark.asyncio
    async def test_error_result(self, client, server, envelope):
        """An error result XDR is a NetworkError carrying the XDR."""
        server.send_transaction.return_value = send_response(error_result_xdr="AAAAtxBad")

        with pytest.raises(NetworkError, match="AAAAtxBad"):
            await client.submit_transaction(envelope)

    @pytest.mark.asyncio
    async def test_missing_hash(self, client, server, envelope):
        """A response without a hash has an unknown outcome."""
        server.send_transaction.return_value = send_response(tx_hash=None)

        with pytest.raises(TransactionError, match="outcome unknown"):
            await client.submit_transaction(envelope)

    @pytest.mark.asyncio
    async def test_try_again_later(self, client, server, envelope):
        """TRY_AGAIN_LATER is not retried and keeps the hash."""
        server.send_transaction.return_value = send_response(status="TRY_AGAIN_LATER")

        with pytest.raises(TransactionError) as exc_info:
            await client.submit_transaction(envelope)

        assert exc_info.value.tx_hash == "abc123"
        server.send_transaction.assert_awaited_once()


class TestTimeouts:
    """Tests for per-call RPC timeouts."""

    @pytest.mark.asyncio
    async def test_rpc_timeout(self, admin_keypair, server):
        """A call exceeding the timeout is a NetworkError."""

        async def slow_load(public_key):
            await asyncio.sleep(1)

        server.load_account = AsyncMock(side_effect=slow_load)
        client = NetworkClient(
            rpc_url="https://soroban-testnet.stellar.org",
            network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
            signer=KeypairSigner(admin_keypair.secret),
            rpc_timeout=0.01,
            server=server,
        )

        with pytest.raises(NetworkError, match="timed out"):
            await client.get_account_sequence(admin_keypair.public_key)


class TestSignAndClose:
    """Tests for signing and shutdown."""

    @pytest.mark.asyncio
    async def test_sign(self, client, envelope):
        """Signing uses the admin credential."""
        client.sign(envelope)

        assert len(envelope.signatures) == 1

    @pytest.mark.asyncio
    async def test_close(self, client, server):
        """Closing releases the RPC session once."""
        await client.close()
        await client.close()

        server.close.assert_awaited_once()
