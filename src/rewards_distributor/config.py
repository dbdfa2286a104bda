"""Application configuration using pydantic-settings.

Values are read once at startup from the environment (or a .env file).
Missing or malformed required values are fatal.
"""

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3

from rewards_distributor.chains import is_local_development_network
from rewards_distributor.exceptions import ConfigurationError
from rewards_distributor.models import GasPolicy, PreflightMode

_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_SCHEDULE_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Chain
    # ======================
    rpc_url: str = Field(description="JSON-RPC endpoint URL")
    private_key: SecretStr = Field(description="Signing key, 32-byte hex")
    contract_address: str = Field(description="Rewards contract address")
    chain_id: int = Field(default=1, gt=0, description="Numeric chain id")

    # ======================
    # Gas
    # ======================
    gas_limit: int = Field(
        default=500_000, gt=0, description="Fallback gas limit when estimation fails"
    )
    gas_price: Optional[int] = Field(
        default=None, gt=0, description="Fixed gas price in wei (unset = use network price)"
    )

    # ======================
    # Distribution policy
    # ======================
    preflight_mode: PreflightMode = Field(
        default=PreflightMode.ADVISORY,
        description="advisory = log status findings, enforce = abort on them",
    )
    schedule_time: str = Field(default="00:00", description="Daily trigger time, HH:MM local")
    schedule_every_minute: bool = Field(
        default=False, description="Fire every minute instead of daily (testing)"
    )

    # ======================
    # Runtime
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return value

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, value: SecretStr) -> SecretStr:
        if not _PRIVATE_KEY_RE.match(value.get_secret_value().strip()):
            raise ValueError("must be 32 bytes of hex")
        return value

    @field_validator("contract_address")
    @classmethod
    def _check_contract_address(cls, value: str) -> str:
        value = value.strip()
        if not Web3.is_address(value):
            raise ValueError("invalid contract address format")
        return Web3.to_checksum_address(value)

    @field_validator("schedule_time")
    @classmethod
    def _check_schedule_time(cls, value: str) -> str:
        if not _SCHEDULE_TIME_RE.match(value.strip()):
            raise ValueError("must be HH:MM")
        return value.strip()

    @property
    def schedule_hour(self) -> int:
        return int(self.schedule_time.split(":")[0])

    @property
    def schedule_minute(self) -> int:
        return int(self.schedule_time.split(":")[1])

    @property
    def is_local_dev(self) -> bool:
        """Check if configured chain is a local development node."""
        return is_local_development_network(self.chain_id)

    @property
    def gas_policy(self) -> GasPolicy:
        return GasPolicy(gas_limit=self.gas_limit, gas_price=self.gas_price)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "rpc_url": self.rpc_url,
            "private_key": "***",
            "contract_address": self.contract_address,
            "chain_id": self.chain_id,
            "local_dev": self.is_local_dev,
            "gas": {
                "limit": self.gas_limit,
                "price": self.gas_price if self.gas_price is not None else "(network)",
            },
            "preflight_mode": self.preflight_mode.value,
            "schedule": "every minute" if self.schedule_every_minute else f"daily at {self.schedule_time}",
            "debug": self.debug,
        }


def load_settings(**overrides) -> Settings:
    """Build settings, turning validation errors into ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            problems.append(f"{field.upper()}: {error['msg']}")
        raise ConfigurationError("Invalid configuration - " + "; ".join(problems)) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
