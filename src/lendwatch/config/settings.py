"""Application settings and configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lendwatch.core.exceptions import ConfigurationError


def default_freshness_minutes() -> dict[str, int]:
    """Freshness window per cache key namespace, in minutes."""
    return {
        "lending": 60,
        "savings": 60,
        "savings-infos": 20,
    }


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LENDWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "lendwatch"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Cache store: redis://... selects Redis, anything else is a SQLAlchemy URL
    cache_url: Optional[str] = None

    # RPC endpoints per chain
    ethereum_rpc_url: Optional[str] = None
    arbitrum_rpc_url: Optional[str] = None
    # Split eth_getLogs scans into windows of at most this many blocks
    max_log_block_range: Optional[int] = None

    # Remote APIs
    vault_catalog_url: str = "https://api.curve.fi/v1/getLendingVaults/all/{chain}"
    savings_stats_url: str = "https://prices.curve.fi/v1/crvusd/savings/statistics"
    savings_vault_url: str = "https://crvusd.curve.fi/#/ethereum/scrvUSD"
    http_timeout_seconds: float = 15.0

    # Reconciliation behavior
    freshness_minutes: dict[str, int] = Field(default_factory=default_freshness_minutes)
    incremental_resume: bool = True
    max_workers: int = 8
    excluded_collateral_symbols: list[str] = Field(default_factory=list)

    def get_cache_url(self) -> str:
        """Get the cache store URL, failing if it is not configured."""
        if not self.cache_url:
            raise ConfigurationError("Cache store URL (LENDWATCH_CACHE_URL)")
        return self.cache_url

    def get_rpc_url(self, chain: str) -> str:
        """Get the RPC endpoint for a chain, failing if it is not configured."""
        url = getattr(self, f"{chain}_rpc_url", None)
        if not url:
            raise ConfigurationError(f"RPC URL for {chain} (LENDWATCH_{chain.upper()}_RPC_URL)")
        return url


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
