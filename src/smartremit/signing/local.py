"""Local signing backend.

Holds the admin keypair in memory. Suitable for the demo deployment where a
single admin account relays every contract call.
"""

import logging

from stellar_sdk import Keypair, TransactionEnvelope

from smartremit.errors import ConfigurationError
from smartremit.signing.base import SignerType, TransactionSigner

logger = logging.getLogger(__name__)


class KeypairSigner(TransactionSigner):
    """Signing backend backed by an in-memory Stellar keypair."""

    def __init__(self, secret_key: str):
        """Initialize signer.

        Args:
            secret_key: Stellar secret seed (S...)

        Raises:
            ConfigurationError: If the secret is missing or malformed
        """
        super().__init__(SignerType.LOCAL)
        if not secret_key:
            raise ConfigurationError("ADMIN_SECRET_KEY missing")
        try:
            self._keypair = Keypair.from_secret(secret_key)
        except Exception as e:
            raise ConfigurationError(
                f"Failed to initialize admin keypair: {type(e).__name__}"
            ) from e

    @property
    def public_key(self) -> str:
        return self._keypair.public_key

    def sign(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        envelope.sign(self._keypair)
        return envelope
