"""
Handler configuration and per-call options.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utxohandler.constants import (
    BROADCAST_ATTEMPTS,
    CONFIRMATION_POLL_INTERVAL,
    DEFAULT_FEE,
)
from utxohandler.models import NetworkType
from utxohandler.retry import RetryPolicy


class BalanceOptions(BaseModel):
    """Options for balance and UTXO queries."""

    address: str | None = Field(
        default=None, description="Address to query, defaults to the signer's address"
    )
    confirmations: int = Field(default=0, ge=0, description="Minimum UTXO confirmations")


class TxOptions(BalanceOptions):
    """Options for a send."""

    fee: int = Field(default=DEFAULT_FEE, ge=0, description="Absolute fee in smallest units")
    subtract_fee: bool = Field(
        default=False, description="Deduct the fee from the sent value instead of the change"
    )


class HandlerConfig(BaseModel):
    """Configuration for a UTXOHandler."""

    network: NetworkType = NetworkType.MAINNET

    # Broadcast retry policy. No delay between attempts unless configured.
    broadcast_attempts: int = Field(default=BROADCAST_ATTEMPTS, ge=1)
    retry_delay: float = Field(default=0.0, ge=0.0, description="Seconds before the 2nd attempt")
    retry_backoff: float = Field(default=1.0, ge=1.0, description="Delay multiplier per attempt")

    # Confirmation monitoring
    confirmation_poll_interval: float = Field(default=CONFIRMATION_POLL_INTERVAL, gt=0.0)
    confirmation_target: int | None = Field(
        default=None,
        ge=1,
        description="Stop monitoring at this depth, None to monitor until closed",
    )

    model_config = {"frozen": True}

    @property
    def testnet(self) -> bool:
        return self.network != NetworkType.MAINNET

    def broadcast_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.broadcast_attempts,
            delay=self.retry_delay,
            backoff=self.retry_backoff,
        )


class Settings(BaseSettings):
    """Environment-driven defaults (UTXOHANDLER_* variables or .env)."""

    model_config = SettingsConfigDict(
        env_prefix="UTXOHANDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    network: NetworkType = NetworkType.MAINNET
    log_level: str = "INFO"

    broadcast_attempts: int = BROADCAST_ATTEMPTS
    retry_delay: float = 0.0
    retry_backoff: float = 1.0

    confirmation_poll_interval: float = CONFIRMATION_POLL_INTERVAL
    confirmation_target: int | None = None

    @model_validator(mode="after")
    def validate_log_level(self) -> Settings:
        level = self.log_level.upper()
        if level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.log_level}")
        object.__setattr__(self, "log_level", level)
        return self

    def to_handler_config(self) -> HandlerConfig:
        return HandlerConfig(
            network=self.network,
            broadcast_attempts=self.broadcast_attempts,
            retry_delay=self.retry_delay,
            retry_backoff=self.retry_backoff,
            confirmation_poll_interval=self.confirmation_poll_interval,
            confirmation_target=self.confirmation_target,
        )


def get_settings() -> Settings:
    return Settings()
