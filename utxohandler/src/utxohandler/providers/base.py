"""
Base data provider interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from utxohandler.models import UTXO


class UTXOProvider(ABC):
    """
    Abstract ledger data provider.

    Implementations wrap a single explorer or node API for one network.
    Every method may raise; callers go through fallback() to recover.
    Failures should be raised as ProviderError so AggregatedError.errors names
    the provider that failed. Other exceptions are recorded unchanged.
    broadcast_transaction() must be safe to resubmit with the same hex.
    """

    name: str = "provider"

    @abstractmethod
    async def fetch_utxos(self, address: str, confirmations: int) -> list[UTXO]:
        """Get unspent outputs of an address with at least ``confirmations``"""

    @abstractmethod
    async def fetch_utxo(self, tx_hash: str, vout: int) -> UTXO:
        """Get a single output by outpoint"""

    @abstractmethod
    async def fetch_transactions(self, address: str, confirmations: int) -> list[UTXO]:
        """Get outputs received by an address, spent or not"""

    @abstractmethod
    async def broadcast_transaction(self, tx_hex: str) -> str:
        """Broadcast a signed transaction, returns its hash"""

    async def close(self) -> None:
        """Release provider resources"""
        pass
