"""
Core data models for UTXOs, send requests and lifecycle events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from utxohandler.constants import DECIMALS, EVENT_CONFIRMATION, EVENT_TRANSACTION_HASH


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass(frozen=True)
class ChainParams:
    """Static description of a UTXO ledger handled by a UTXOHandler."""

    ticker: str
    aliases: tuple[str, ...]
    decimals: int = DECIMALS


LITECOIN = ChainParams(ticker="LTC", aliases=("LTC", "LITECOIN"))


@dataclass(frozen=True)
class UTXO:
    tx_hash: str
    vout: int
    amount: int  # smallest units
    confirmations: int
    script_pubkey: bytes = b""

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"UTXO amount must be >= 0, got {self.amount}")
        if self.confirmations < 0:
            raise ValueError(f"UTXO confirmations must be >= 0, got {self.confirmations}")

    @property
    def outpoint(self) -> str:
        return f"{self.tx_hash}:{self.vout}"


@dataclass(frozen=True)
class TransactionRequest:
    """Parameters of a single send. Built once, never mutated."""

    from_address: str
    to_address: str
    change_address: str
    value_units: int
    fee_units: int
    subtract_fee: bool = False

    def __post_init__(self) -> None:
        if self.value_units <= 0:
            raise ValueError(f"value_units must be positive, got {self.value_units}")
        if self.fee_units < 0:
            raise ValueError(f"fee_units must be >= 0, got {self.fee_units}")


@dataclass
class TransactionHandle:
    """
    Mutable state shared by a send lifecycle and its confirmation monitor.

    Each field has exactly one writer:
    - tx_hash, errored: the lifecycle task
    - confirmation_count: the confirmation monitor
    """

    tx_hash: str | None = None
    errored: bool = False
    confirmation_count: int = 0

    def record_hash(self, tx_hash: str) -> None:
        if self.tx_hash is not None:
            raise RuntimeError(f"Transaction hash already recorded: {self.tx_hash}")
        self.tx_hash = tx_hash


@dataclass(frozen=True)
class TransactionEvent:
    name: str
    value: Any = field(default=None)

    @classmethod
    def transaction_hash(cls, tx_hash: str) -> TransactionEvent:
        return cls(EVENT_TRANSACTION_HASH, tx_hash)

    @classmethod
    def confirmation(cls, count: int) -> TransactionEvent:
        return cls(EVENT_CONFIRMATION, count)

    def as_dict(self) -> dict[str, Any]:
        return {self.name: self.value}
