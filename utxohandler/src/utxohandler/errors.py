"""
Exception hierarchy for provider dispatch and the send lifecycle.
"""

from __future__ import annotations


class HandlerError(Exception):
    """Base class for all utxohandler errors."""


class ProviderError(HandlerError):
    """
    A single provider endpoint failed.

    UTXOProvider implementations raise this for their own failures.
    fallback() records it as is, alongside any unexpected exception.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class AggregatedError(HandlerError):
    """
    Every endpoint of a fallback sequence failed.

    ``errors`` holds the failures in the order the endpoints were tried.
    """

    def __init__(self, errors: list[BaseException]):
        self.errors = list(errors)
        if self.errors:
            details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
            message = f"All {len(self.errors)} endpoint(s) failed: {details}"
        else:
            message = "No provider endpoints available"
        super().__init__(message)


class RetryExhaustedError(HandlerError):
    """An operation failed on every permitted attempt. Only the last failure is kept."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempt(s): {last_error}")


class BuildError(HandlerError):
    """The transaction builder rejected the request (insufficient funds, bad address...)."""


class BroadcastError(RetryExhaustedError):
    """Broadcast submission failed after all retries."""
