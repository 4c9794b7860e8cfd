"""
Interfaces of the external transaction-building collaborator.

Signing, script construction and address derivation live outside this
package. The lifecycle only needs a sender address, a builder that turns a
request plus candidate UTXOs into a signed transaction, and that
transaction's wire hex.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from utxohandler.models import UTXO, NetworkType, TransactionRequest


@runtime_checkable
class Signer(Protocol):
    """Signing capability bound to one key."""

    def get_address(self) -> str: ...


@runtime_checkable
class SignedTransaction(Protocol):
    def to_hex(self) -> str: ...


@runtime_checkable
class TransactionBuilder(Protocol):
    async def build(
        self,
        network: NetworkType,
        signer: Signer,
        request: TransactionRequest,
        utxos: list[UTXO],
    ) -> SignedTransaction:
        """
        Build and sign a transaction spending from ``utxos``.

        ``utxos`` is ordered largest first; the builder consumes as many as it
        needs. Raises on insufficient funds or invalid parameters.
        """
        ...
