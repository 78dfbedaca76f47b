"""
Configuration for Product Tracker API.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    API configuration settings.

    All settings can be overridden via environment variables
    (e.g. RPC_URL, CONTRACT_ADDRESS, PRIVATE_KEY) or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Server
    host: str = Field(
        default="127.0.0.1",
        description="API host (127.0.0.1 for local only, 0.0.0.0 for external)",
    )
    port: int = Field(default=4000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode (uvicorn reload)")
    log_level: str = Field(default="INFO", description="Root log level")
    allowed_origins: list[str] = Field(
        default=["*"],
        description="CORS allowed origins",
    )

    # EVM
    rpc_url: str = Field(
        default="https://api.avax-test.network/ext/bc/C/rpc",
        description="JSON-RPC endpoint of the chain hosting the contract",
    )
    rpc_timeout_seconds: float = Field(
        default=30,
        gt=0,
        description="HTTP timeout for a single JSON-RPC request",
    )
    chain_id: Optional[int] = Field(
        default=None,
        description="Chain ID for signed transactions (read from the node when unset)",
    )
    private_key: Optional[str] = Field(
        default=None,
        description="Private key for signing transactions (writes are disabled without it)",
    )
    tx_timeout_seconds: float = Field(
        default=120,
        gt=0,
        description="How long to wait for a transaction receipt",
    )

    # Contract
    contract_address: str = Field(
        default="0xd8b934580fcE35a11B58C6D73aDeE468a2833fa8",
        description="ProductTracker contract address",
    )
    contract_abi_path: Optional[Path] = Field(
        default=None,
        description="Path to a compiled artifact or ABI JSON (built-in ABI when unset)",
    )

    # Presentation
    display_timezone: Optional[str] = Field(
        default=None,
        description="IANA time zone for history timestamps (server local time when unset)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
