"""Transaction signing services.

Provides signing implementations:
- KeypairSigner: In-memory admin keypair
"""

from smartremit.signing.base import SignerType, TransactionSigner
from smartremit.signing.local import KeypairSigner

__all__ = [
    "SignerType",
    "TransactionSigner",
    "KeypairSigner",
]
