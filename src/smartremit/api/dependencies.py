"""Service container and FastAPI dependencies.

The container is built once from Settings and shared by every request. Tests
pass their own container to ``create_app``.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request

from smartremit.accounts import AccountDirectory, parse_label
from smartremit.chain.client import NetworkClient
from smartremit.config import Settings, get_settings
from smartremit.errors import UnauthorizedError
from smartremit.models import ForexPair
from smartremit.routing.base import QuoteProvider
from smartremit.routing.soroswap import SoroswapClient
from smartremit.services.forex import ForexQuoteAdapter
from smartremit.services.state import StateReconciler
from smartremit.services.transactions import TransactionOrchestrator
from smartremit.signing.local import KeypairSigner

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Process-wide services, built once at startup."""

    settings: Settings
    client: NetworkClient
    directory: AccountDirectory
    provider: QuoteProvider
    orchestrator: TransactionOrchestrator
    reconciler: StateReconciler
    forex: ForexQuoteAdapter

    async def close(self) -> None:
        """Close network sessions."""
        await self.client.close()
        await self.provider.close()


def build_services(settings: Optional[Settings] = None) -> Services:
    """Wire every service from settings.

    Raises:
        ConfigurationError: If the admin secret is missing or invalid
    """
    settings = settings or get_settings()

    signer = KeypairSigner(settings.admin_secret_key)
    if settings.admin_public_key and settings.admin_public_key != signer.public_key:
        logger.warning("ADMIN_PUBLIC_KEY does not match ADMIN_SECRET_KEY; using the secret's key")

    client = NetworkClient(
        rpc_url=settings.soroban_rpc_url,
        network_passphrase=settings.network_passphrase,
        signer=signer,
        base_fee=settings.tx_base_fee,
        tx_timeout=settings.tx_timeout_seconds,
        rpc_timeout=settings.rpc_timeout_seconds,
    )
    directory = AccountDirectory(
        settings.account_contracts, multisig_address=settings.multisig_contract_id
    )
    pair = ForexPair(
        usdc_contract_id=settings.usdc_contract_id,
        eurc_contract_id=settings.eurc_contract_id,
        usdc_account=parse_label(settings.forex_usdc_account_label, "FOREX_USDC_ACCOUNT_LABEL"),
        eurc_account=parse_label(settings.forex_eurc_account_label, "FOREX_EURC_ACCOUNT_LABEL"),
    )
    provider = SoroswapClient(
        api_key=settings.soroswap_api_key,
        base_url=settings.soroswap_api_url,
        network=settings.soroswap_quote_network,
        protocols=settings.protocols,
    )

    orchestrator = TransactionOrchestrator(client, directory, settings.explorer_url)
    reconciler = StateReconciler(
        client,
        directory,
        usdc_contract_id=settings.usdc_contract_id,
        forex=pair,
        multisig_label=settings.multisig_label,
        multisig_threshold=settings.multisig_threshold,
        multisig_signers=[parse_label(s, "MULTISIG_SIGNERS") for s in settings.signer_labels],
    )
    forex = ForexQuoteAdapter(provider, orchestrator, pair)

    logger.info(f"Services ready on {settings.network} ({settings.soroban_rpc_url})")
    return Services(
        settings=settings,
        client=client,
        directory=directory,
        provider=provider,
        orchestrator=orchestrator,
        reconciler=reconciler,
        forex=forex,
    )


def get_services(request: Request) -> Services:
    """Get the app's service container, building it on first use."""
    if request.app.state.services is None:
        request.app.state.services = build_services()
    return request.app.state.services


def require_admin_auth(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> bool:
    """Verify ``Authorization: Bearer <ADMIN_AUTH_TOKEN>``."""
    if not authorization:
        raise UnauthorizedError("Authorization header is required")

    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token:
        raise UnauthorizedError("Invalid authorization header format. Expected: Bearer <token>")

    expected = get_services(request).settings.admin_auth_token
    if not expected or not hmac.compare_digest(token, expected):
        raise UnauthorizedError("Invalid authorization token")

    return True
