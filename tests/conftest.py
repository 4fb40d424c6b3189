"""Pytest configuration and fixtures."""

import os

import pytest
from stellar_sdk import Keypair
from stellar_sdk.strkey import StrKey

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["NETWORK"] = "TESTNET"
os.environ["DEBUG"] = "true"

from smartremit.accounts import AccountDirectory, AccountLabel
from smartremit.chain.client import SubmitResult
from smartremit.chain.scval import to_native
from smartremit.models import ForexPair

EXPLORER = "https://stellar.expert/explorer/testnet/tx/"


def contract_address() -> str:
    """Random contract strkey (C...)."""
    return StrKey.encode_contract(os.urandom(32))


@pytest.fixture
def addresses() -> dict[str, str]:
    """Contract addresses for accounts A-D."""
    return {label.value: contract_address() for label in AccountLabel}


@pytest.fixture
def multisig_address() -> str:
    return contract_address()


@pytest.fixture
def directory(addresses, multisig_address) -> AccountDirectory:
    return AccountDirectory(addresses, multisig_address=multisig_address)


@pytest.fixture
def usdc_contract() -> str:
    return contract_address()


@pytest.fixture
def eurc_contract() -> str:
    return contract_address()


@pytest.fixture
def forex_pair(usdc_contract, eurc_contract) -> ForexPair:
    return ForexPair(
        usdc_contract_id=usdc_contract,
        eurc_contract_id=eurc_contract,
        usdc_account=AccountLabel.A,
        eurc_account=AccountLabel.B,
    )


@pytest.fixture
def admin_keypair() -> Keypair:
    return Keypair.random()


class FakeNetworkClient:
    """In-memory stand-in for NetworkClient.

    ``build_invocation`` returns the ContractCall itself so later steps can
    inspect it. Reads are answered by ``responses``, keyed by
    (contract_id, function_name); a value may be an SCVal, an exception to
    raise, or a callable taking the call.
    """

    def __init__(self, responses=None, submit_hash: str = "abc123"):
        self.responses = responses or {}
        self.submit_hash = submit_hash
        self.built = []
        self.prepared = []
        self.signed = []
        self.submitted = []
        self.prepare_error = None
        self.submit_error = None

    async def build_invocation(self, call):
        self.built.append(call)
        return call

    async def prepare_transaction(self, envelope):
        if self.prepare_error:
            raise self.prepare_error
        self.prepared.append(envelope)
        return envelope

    def sign(self, envelope):
        self.signed.append(envelope)
        return envelope

    async def submit_transaction(self, envelope):
        if self.submit_error:
            raise self.submit_error
        self.submitted.append(envelope)
        return SubmitResult(hash=self.submit_hash, status="PENDING")

    async def simulate_transaction(self, call):
        response = self.responses.get((call.contract_id, call.function_name))
        if callable(response) and not isinstance(response, type):
            response = response(call)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self):
        return None


def call_args(call) -> list:
    """Decode a ContractCall's parameters into Python values."""
    return [to_native(parameter) for parameter in call.parameters]


@pytest.fixture
def fake_client() -> FakeNetworkClient:
    return FakeNetworkClient()
