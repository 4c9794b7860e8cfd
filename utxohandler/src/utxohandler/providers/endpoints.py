"""
Ordered endpoint lists per provider operation.

A ProviderSet holds the providers configured for each network, in priority
order, and turns an operation into the list of zero-argument endpoints that
fallback() consumes.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial

from loguru import logger

from utxohandler.models import UTXO, NetworkType
from utxohandler.providers.base import UTXOProvider
from utxohandler.retry import Endpoint


class ProviderSet:
    """Providers per network, highest priority first."""

    def __init__(self, providers: dict[NetworkType, Sequence[UTXOProvider]]):
        self._providers = {network: list(items) for network, items in providers.items()}

    @classmethod
    def single(cls, network: NetworkType, *providers: UTXOProvider) -> ProviderSet:
        return cls({network: providers})

    def for_network(self, network: NetworkType) -> list[UTXOProvider]:
        return list(self._providers.get(network, []))

    def fetch_utxo(self, network: NetworkType, tx_hash: str, vout: int) -> list[Endpoint[UTXO]]:
        return [partial(p.fetch_utxo, tx_hash, vout) for p in self.for_network(network)]

    def fetch_utxos(
        self, network: NetworkType, address: str, confirmations: int
    ) -> list[Endpoint[list[UTXO]]]:
        return [partial(p.fetch_utxos, address, confirmations) for p in self.for_network(network)]

    def fetch_transactions(
        self, network: NetworkType, address: str, confirmations: int
    ) -> list[Endpoint[list[UTXO]]]:
        return [
            partial(p.fetch_transactions, address, confirmations)
            for p in self.for_network(network)
        ]

    def broadcast_transaction(self, network: NetworkType, tx_hex: str) -> list[Endpoint[str]]:
        return [partial(p.broadcast_transaction, tx_hex) for p in self.for_network(network)]

    async def close(self) -> None:
        """Close every provider, even if some of them fail to close."""
        for network, providers in self._providers.items():
            for provider in providers:
                try:
                    await provider.close()
                except Exception as e:
                    logger.warning(f"Error closing {network.value} provider {provider.name}: {e}")
