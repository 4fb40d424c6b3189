"""Routing module for forex quotes.

Providers:
- Soroswap: Stellar DEX aggregator (Soroswap, Phoenix, Aqua)
"""

from smartremit.routing.base import EXACT_IN, EXACT_OUT, QuoteProvider
from smartremit.routing.soroswap import SoroswapClient

__all__ = [
    "EXACT_IN",
    "EXACT_OUT",
    "QuoteProvider",
    "SoroswapClient",
]
