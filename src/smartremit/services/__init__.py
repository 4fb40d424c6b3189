"""Core services: transaction orchestration, state reads and forex.

SECURITY: Only TransactionOrchestrator signs and submits. StateReconciler
reads through simulation and never submits.
"""

from smartremit.services.forex import ForexQuoteAdapter
from smartremit.services.state import StateReconciler
from smartremit.services.transactions import TransactionOrchestrator

__all__ = [
    "ForexQuoteAdapter",
    "StateReconciler",
    "TransactionOrchestrator",
]
