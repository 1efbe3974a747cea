"""Canonical configuration surface for Cherry services."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Dict, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

ReinitializePolicy = Literal["reject", "overwrite"]


class CherrySettings(BaseSettings):
    """Main Cherry configuration."""

    # Environment
    environment: Literal["dev", "sandbox", "prod"] = "dev"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Default contract addresses used by the API composition root
    gateway_address: str = "bridge_gateway"
    escrow_address: str = "escrow_ledger"

    # What initialize() does for a token that already has an allowance entry
    reinitialize_policy: ReinitializePolicy = "reject"

    # Empty means any caller may deposit/withdraw
    authorized_callers: Annotated[List[str], NoDecode] = Field(default_factory=list)

    # API key -> caller identity for the direct deposit/withdraw routes,
    # e.g. CHERRY_CALLER_API_KEYS='{"sk_ops": "ops"}'
    caller_api_keys: Dict[str, str] = Field(default_factory=dict)

    # Allowances seeded when the API starts, e.g. CHERRY_INITIAL_ALLOWANCES='{"tok": 100}'
    initial_allowances: Dict[str, int] = Field(default_factory=dict)

    # CORS
    allowed_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: [
        "http://localhost:3000",
    ])

    class Config:
        env_prefix = "CHERRY_"
        env_nested_delimiter = "__"
        env_file = ".env"
        extra = "ignore"

    @field_validator("authorized_callers", "allowed_origins", mode="before")
    @classmethod
    def parse_csv(cls, v):
        """Parse comma-separated lists from env vars."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("initial_allowances")
    @classmethod
    def validate_allowances(cls, v: Dict[str, int]) -> Dict[str, int]:
        for token, value in v.items():
            if not token.strip():
                raise ValueError("initial_allowances contains an empty token")
            if value < 0:
                raise ValueError(f"initial allowance for {token} cannot be negative")
        return v

    @field_validator("caller_api_keys")
    @classmethod
    def validate_api_keys(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, identity in v.items():
            if not key.strip() or not identity.strip():
                raise ValueError("caller_api_keys entries need a key and an identity")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def caller_allowlist(self) -> frozenset[str] | None:
        """Allowlist for deposit/withdraw, or None when open."""
        return frozenset(self.authorized_callers) if self.authorized_callers else None


@lru_cache
def load_settings(env_file: str | None = None) -> CherrySettings:
    """Load CherrySettings once per process to keep services consistent."""
    env_path = Path(env_file) if env_file else None
    return CherrySettings(_env_file=env_path)
