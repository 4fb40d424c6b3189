"""Soroban RPC access and contract value conversion."""

from smartremit.chain.client import ContractCall, NetworkClient, SubmitResult
from smartremit.chain.scval import to_native

__all__ = [
    "ContractCall",
    "NetworkClient",
    "SubmitResult",
    "to_native",
]
