"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    ASSET_DECIMALS,
    DEFAULT_AVAX_RPC_URLS,
    DEFAULT_ETH_RPC_URLS,
    DEFAULT_EXCHANGES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SOLANA_RPC_URLS,
    DEFAULT_WALLETS,
    AssetConfig,
)

load_dotenv()

SECRET_FIELDS = (
    "etherscan_api_key",
    "snowtrace_api_key",
    "blockfrost_project_id",
    "cardanoscan_api_key",
    "coinmarketcap_api_key",
    "refresh_secret",
)


class WalletSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with WALLET_ORACLE_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- tracked wallets: symbol -> address ---
    wallets: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_WALLETS))

    # --- cache ---
    redis_url: str | None = None
    cache_connect_retries: int = Field(default=3, ge=1)

    # --- upstream calls ---
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    eth_rpc_urls: list[str] = Field(default_factory=lambda: list(DEFAULT_ETH_RPC_URLS))
    avax_rpc_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_AVAX_RPC_URLS)
    )
    solana_rpc_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOLANA_RPC_URLS)
    )
    exchanges: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCHANGES))

    # --- provider credentials ---
    etherscan_api_key: SecretStr | None = None
    snowtrace_api_key: SecretStr | None = None
    blockfrost_project_id: SecretStr | None = None
    cardanoscan_api_key: SecretStr | None = None
    coinmarketcap_api_key: SecretStr | None = None

    # --- scheduled refresh guard ---
    refresh_secret: SecretStr | None = None

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="WALLET_ORACLE_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
    )

    @field_validator(*SECRET_FIELDS, mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("wallets")
    @classmethod
    def normalize_wallets(cls, v: dict[str, str]) -> dict[str, str]:
        """Upper-case symbols and reject assets we have no provider chain for."""
        normalized = {symbol.upper(): address for symbol, address in v.items()}
        unsupported = sorted(set(normalized) - set(ASSET_DECIMALS))
        if unsupported:
            raise ValueError(
                f"Unsupported wallet symbol(s): {', '.join(unsupported)}. "
                f"Supported: {', '.join(ASSET_DECIMALS)}"
            )
        empty = sorted(symbol for symbol, address in normalized.items() if not address)
        if empty:
            raise ValueError(f"Empty wallet address for: {', '.join(empty)}")
        return normalized

    @field_validator("exchanges")
    @classmethod
    def normalize_exchanges(cls, v: list[str]) -> list[str]:
        return [name.lower() for name in v]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("WALLET_ORACLE_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    # Try default locations
                    local_config = Path("wallet-oracle.toml")
                    user_config = (
                        Path.home() / ".config" / "wallet-oracle" / "config.toml"
                    )
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [wallet_oracle]
                body = data.get("wallet_oracle", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump()
        for key in SECRET_FIELDS:
            if getattr(self, key) is not None:
                data[key] = "***redacted***"
        return data

    @property
    def asset_configs(self) -> tuple[AssetConfig, ...]:
        """Tracked wallets as immutable asset configurations."""
        return tuple(
            AssetConfig(symbol=symbol, address=address, decimals=ASSET_DECIMALS[symbol])
            for symbol, address in self.wallets.items()
        )

    @property
    def symbols(self) -> list[str]:
        return list(self.wallets)

    def secret(self, name: str) -> str:
        """Return a secret's plain value, or an empty string when unset."""
        value: SecretStr | None = getattr(self, name)
        return value.get_secret_value() if value is not None else ""
