"""
Ledger data provider interface and per-network endpoint ordering.
"""

from utxohandler.providers.base import UTXOProvider
from utxohandler.providers.endpoints import ProviderSet

__all__ = [
    "ProviderSet",
    "UTXOProvider",
]
