"""
UTXO lookup, balance aggregation and spend-candidate ordering.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from utxohandler.models import UTXO, NetworkType
from utxohandler.providers.endpoints import ProviderSet
from utxohandler.retry import fallback


class UTXOSelector:
    """
    Reads unspent outputs through the configured providers.

    Every lookup goes through fallback(), so a single provider outage is
    tolerated. Amounts stay in smallest units.
    """

    def __init__(self, providers: ProviderSet, network: NetworkType = NetworkType.MAINNET):
        self.providers = providers
        self.network = network

    async def get_utxos(self, address: str, confirmations: int = 0) -> list[UTXO]:
        """Unspent outputs of address with at least ``confirmations``, in provider order."""
        utxos = await fallback(self.providers.fetch_utxos(self.network, address, confirmations))
        eligible = [utxo for utxo in utxos if utxo.confirmations >= confirmations]
        if len(eligible) != len(utxos):
            logger.debug(
                f"Dropped {len(utxos) - len(eligible)} UTXO(s) below {confirmations} confirmations"
            )
        return eligible

    async def get_utxo(self, tx_hash: str, vout: int) -> UTXO:
        return await fallback(self.providers.fetch_utxo(self.network, tx_hash, vout))

    async def get_transactions(self, address: str, confirmations: int = 0) -> list[UTXO]:
        return await fallback(
            self.providers.fetch_transactions(self.network, address, confirmations)
        )

    async def get_balance(self, address: str, confirmations: int = 0) -> int:
        """Exact sum of UTXO amounts in smallest units."""
        return total_amount(await self.get_utxos(address, confirmations))

    async def select_for_spending(self, address: str, confirmations: int = 0) -> list[UTXO]:
        """
        Spend candidates for address, largest first.

        Whether the candidates cover the target is left to the transaction
        builder.
        """
        return sort_largest_first(await self.get_utxos(address, confirmations))

    async def get_confirmations(self, tx_hash: str) -> int:
        """Confirmation depth of a transaction, read from its first output."""
        utxo = await self.get_utxo(tx_hash, 0)
        return utxo.confirmations


def total_amount(utxos: Iterable[UTXO]) -> int:
    return sum((utxo.amount for utxo in utxos), 0)


def sort_largest_first(utxos: Iterable[UTXO]) -> list[UTXO]:
    """Greedy ordering: largest amount first, ties keep provider order."""
    return sorted(utxos, key=lambda u: u.amount, reverse=True)
