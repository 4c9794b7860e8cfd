"""
Public asset handler: balances, UTXO queries and sends for one UTXO ledger.
"""

from __future__ import annotations

import weakref
from decimal import Decimal

from loguru import logger

from utxohandler.builder import Signer, TransactionBuilder
from utxohandler.config import BalanceOptions, HandlerConfig, TxOptions
from utxohandler.confirmations import ConfirmationMonitor
from utxohandler.events import EventChannel
from utxohandler.lifecycle import PendingTransaction, TransactionLifecycle
from utxohandler.models import LITECOIN, UTXO, ChainParams, TransactionRequest
from utxohandler.providers.endpoints import ProviderSet
from utxohandler.units import from_units, to_units
from utxohandler.utxo import UTXOSelector


class UTXOHandler:
    """
    Asset handler for a UTXO ledger.

    Amounts cross the public boundary as Decimal display values (get_balance,
    send) or as integer smallest units (get_balance_in_units, send_units).
    Internally everything is an integer.
    """

    def __init__(
        self,
        signer: Signer,
        builder: TransactionBuilder,
        providers: ProviderSet,
        config: HandlerConfig | None = None,
        chain: ChainParams = LITECOIN,
    ):
        self.signer = signer
        self.builder = builder
        self.providers = providers
        self.config = config or HandlerConfig()
        self.chain = chain
        self.network = self.config.network
        self.selector = UTXOSelector(providers, self.network)
        # Tasks hold their lifecycle, so entries live as long as a send or monitor runs
        self._lifecycles: weakref.WeakSet[TransactionLifecycle] = weakref.WeakSet()

        if not providers.for_network(self.network):
            logger.warning(f"No providers configured for {chain.ticker} {self.network.value}")

    def handles_asset(self, asset: str) -> bool:
        return isinstance(asset, str) and asset.upper() in self.chain.aliases

    def _check_asset(self, asset: str) -> None:
        if not self.handles_asset(asset):
            raise ValueError(f"Unsupported asset {asset!r}, expected {self.chain.ticker}")

    def address(self, asset: str) -> str:
        self._check_asset(asset)
        return self.signer.get_address()

    # UTXO queries

    async def get_utxos(self, address: str, confirmations: int = 0) -> list[UTXO]:
        return await self.selector.get_utxos(address, confirmations)

    async def get_utxo(self, tx_hash: str, vout: int) -> UTXO:
        return await self.selector.get_utxo(tx_hash, vout)

    async def get_transactions(self, address: str, confirmations: int = 0) -> list[UTXO]:
        return await self.selector.get_transactions(address, confirmations)

    async def get_confirmations(self, tx_hash: str) -> int:
        return await self.selector.get_confirmations(tx_hash)

    # Balance

    async def get_balance(self, asset: str, options: BalanceOptions | None = None) -> Decimal:
        units = await self.get_balance_in_units(asset, options)
        return from_units(units, self.chain.decimals)

    async def get_balance_in_units(
        self, asset: str, options: BalanceOptions | None = None
    ) -> int:
        self._check_asset(asset)
        options = options or BalanceOptions()
        address = options.address or self.signer.get_address()
        return await self.selector.get_balance(address, options.confirmations)

    # Transfer

    def send(
        self,
        to: str,
        value: Decimal,
        asset: str,
        options: TxOptions | None = None,
    ) -> PendingTransaction:
        """
        Send ``value`` display units to ``to``.

        Must be called from a running event loop. Returns immediately; await
        the result for the transaction hash.
        """
        return self.send_units(to, to_units(value, self.chain.decimals), asset, options)

    def send_units(
        self,
        to: str,
        value_units: int,
        asset: str,
        options: TxOptions | None = None,
    ) -> PendingTransaction:
        """Send ``value_units`` smallest units to ``to``. Spends from the signer's address."""
        options = options or TxOptions()
        from_address = self.address(asset)

        request = TransactionRequest(
            from_address=from_address,
            to_address=to,
            change_address=from_address,
            value_units=value_units,
            fee_units=options.fee,
            subtract_fee=options.subtract_fee,
        )

        monitor = ConfirmationMonitor(
            EventChannel(),
            interval=self.config.confirmation_poll_interval,
            target=self.config.confirmation_target,
        )
        lifecycle = TransactionLifecycle(
            request=request,
            signer=self.signer,
            builder=self.builder,
            selector=self.selector,
            providers=self.providers,
            network=self.network,
            confirmations=options.confirmations,
            retry_policy=self.config.broadcast_retry_policy(),
            monitor=monitor,
        )
        pending = lifecycle.start()
        self._lifecycles.add(lifecycle)
        return pending

    async def close(self) -> None:
        """Stop every send still in flight or monitoring, then close the providers."""
        for lifecycle in list(self._lifecycles):
            await lifecycle.close()
        self._lifecycles.clear()
        await self.providers.close()
