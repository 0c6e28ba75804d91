"""Data source providers module."""

from lendwatch.providers.event_source import EventSource
from lendwatch.providers.valuation_source import ValuationSource
from lendwatch.providers.vault_catalog import VaultCatalog, CurveVaultCatalog
from lendwatch.providers.savings_stats import SavingsStatsSource, CurveSavingsStatsSource
from lendwatch.providers.web3_provider import (
    Web3Clients,
    Web3EventSource,
    Web3ValuationSource,
)

__all__ = [
    "EventSource",
    "ValuationSource",
    "VaultCatalog",
    "CurveVaultCatalog",
    "SavingsStatsSource",
    "CurveSavingsStatsSource",
    "Web3Clients",
    "Web3EventSource",
    "Web3ValuationSource",
]
