"""
utxohandler - Resilient sends on a UTXO ledger through redundant providers

Provides provider fallback and retry, UTXO balance/selection, and the
build -> broadcast -> confirmation lifecycle of a send.
"""

__version__ = "0.1.0"

from utxohandler.builder import SignedTransaction, Signer, TransactionBuilder
from utxohandler.config import BalanceOptions, HandlerConfig, Settings, TxOptions, get_settings
from utxohandler.confirmations import ConfirmationMonitor
from utxohandler.errors import (
    AggregatedError,
    BroadcastError,
    BuildError,
    HandlerError,
    ProviderError,
    RetryExhaustedError,
)
from utxohandler.events import EventChannel
from utxohandler.handler import UTXOHandler
from utxohandler.lifecycle import PendingTransaction, TransactionLifecycle, TransactionState
from utxohandler.log import setup_logging
from utxohandler.models import (
    LITECOIN,
    UTXO,
    ChainParams,
    NetworkType,
    TransactionEvent,
    TransactionHandle,
    TransactionRequest,
)
from utxohandler.providers import ProviderSet, UTXOProvider
from utxohandler.retry import RetryPolicy, fallback, retry_n_times
from utxohandler.units import from_units, to_units
from utxohandler.utxo import UTXOSelector, sort_largest_first, total_amount

__all__ = [
    "AggregatedError",
    "BalanceOptions",
    "BroadcastError",
    "BuildError",
    "ChainParams",
    "ConfirmationMonitor",
    "EventChannel",
    "HandlerConfig",
    "HandlerError",
    "LITECOIN",
    "NetworkType",
    "PendingTransaction",
    "ProviderError",
    "ProviderSet",
    "RetryExhaustedError",
    "RetryPolicy",
    "Settings",
    "SignedTransaction",
    "Signer",
    "TransactionBuilder",
    "TransactionEvent",
    "TransactionHandle",
    "TransactionLifecycle",
    "TransactionRequest",
    "TransactionState",
    "TxOptions",
    "UTXO",
    "UTXOHandler",
    "UTXOProvider",
    "UTXOSelector",
    "fallback",
    "from_units",
    "get_settings",
    "retry_n_times",
    "setup_logging",
    "sort_largest_first",
    "to_units",
    "total_amount",
]
