"""
Test configuration for utxohandler tests.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from utxohandler.errors import ProviderError
from utxohandler.models import UTXO, NetworkType, TransactionRequest
from utxohandler.providers import ProviderSet, UTXOProvider

SENDER = "LTC1qsender000000000000000000000000000000"
RECIPIENT = "LTC1qrecipient0000000000000000000000000"
TX_HASH = "ab" * 32


class FakeProvider(UTXOProvider):
    """In-memory provider that records every call."""

    def __init__(
        self,
        name: str = "fake",
        utxos: list[UTXO] | None = None,
        confirmations: int = 0,
        broadcast_hash: str = TX_HASH,
        fail: bool = False,
        broadcast_failures: int = 0,
    ):
        self.name = name
        self.utxos = list(utxos or [])
        self.confirmations = confirmations
        self.broadcast_hash = broadcast_hash
        self.fail = fail
        self.broadcast_failures = broadcast_failures
        self.calls: list[str] = []
        self.broadcasts: list[str] = []
        self.closed = False

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail:
            raise ProviderError(self.name, f"{operation} unavailable")

    async def fetch_utxos(self, address: str, confirmations: int) -> list[UTXO]:
        self._check("fetch_utxos")
        return [u for u in self.utxos if u.confirmations >= confirmations]

    async def fetch_utxo(self, tx_hash: str, vout: int) -> UTXO:
        self._check("fetch_utxo")
        return UTXO(tx_hash=tx_hash, vout=vout, amount=1_000, confirmations=self.confirmations)

    async def fetch_transactions(self, address: str, confirmations: int) -> list[UTXO]:
        self._check("fetch_transactions")
        return list(self.utxos)

    async def broadcast_transaction(self, tx_hex: str) -> str:
        self.broadcasts.append(tx_hex)
        self._check("broadcast_transaction")
        if self.broadcast_failures > 0:
            self.broadcast_failures -= 1
            raise ProviderError(self.name, "broadcast rejected")
        return self.broadcast_hash

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeTransaction:
    raw: str

    def to_hex(self) -> str:
        return self.raw


class FakeSigner:
    def __init__(self, address: str = SENDER):
        self._address = address

    def get_address(self) -> str:
        return self._address


class FakeBuilder:
    """Spends UTXOs in the given order until value + fee is covered."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[TransactionRequest, list[UTXO]]] = []

    async def build(
        self,
        network: NetworkType,
        signer: FakeSigner,
        request: TransactionRequest,
        utxos: list[UTXO],
    ) -> FakeTransaction:
        self.calls.append((request, utxos))
        if self.error is not None:
            raise self.error

        needed = request.value_units + (0 if request.subtract_fee else request.fee_units)
        total = 0
        spent = []
        for utxo in utxos:
            spent.append(utxo)
            total += utxo.amount
            if total >= needed:
                break
        if total < needed:
            raise ValueError(f"Insufficient funds: need {needed}, have {total}")

        return FakeTransaction("0200" + "".join(u.tx_hash[:8] for u in spent))


def make_utxo(amount: int, confirmations: int = 1, index: int = 0) -> UTXO:
    return UTXO(
        tx_hash=f"{index:02x}" * 32,
        vout=index,
        amount=amount,
        confirmations=confirmations,
        script_pubkey=bytes.fromhex("0014" + "00" * 20),
    )


@pytest.fixture
def sample_utxos() -> list[UTXO]:
    """UTXOs worth 19 LTC in total, not in amount order."""
    return [
        make_utxo(500_000_000, confirmations=3, index=1),
        make_utxo(300_000_000, confirmations=0, index=2),
        make_utxo(1_000_000_000, confirmations=6, index=3),
        make_utxo(100_000_000, confirmations=1, index=4),
    ]


@pytest.fixture
def provider(sample_utxos: list[UTXO]) -> FakeProvider:
    return FakeProvider(name="primary", utxos=sample_utxos, confirmations=2)


@pytest.fixture
def provider_set(provider: FakeProvider) -> ProviderSet:
    return ProviderSet.single(NetworkType.MAINNET, provider)


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def builder() -> FakeBuilder:
    return FakeBuilder()
