"""Base interface for transaction signing.

Signing flow:
1. Build unsigned transaction envelope
2. Prepare it (simulation fills in resource fees and footprint)
3. Signer attaches its signature to the envelope
4. Submit the signed envelope

Every write is signed by the same admin credential; the smart account
contracts decide whether the call is authorized.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from stellar_sdk import TransactionEnvelope

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Type of signing backend."""
    LOCAL = "local"           # Secret key in memory


class TransactionSigner(ABC):
    """Abstract base class for signing backends.

    Implementations hold exactly one credential and never expose it.
    """

    def __init__(self, signer_type: SignerType):
        self.signer_type = signer_type

    @property
    @abstractmethod
    def public_key(self) -> str:
        """Public key (G...) of the signing account."""
        pass

    @abstractmethod
    def sign(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        """Sign a prepared transaction envelope in place.

        Args:
            envelope: Prepared transaction

        Returns:
            The same envelope, now carrying the signature
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value}, public_key={self.public_key})"
