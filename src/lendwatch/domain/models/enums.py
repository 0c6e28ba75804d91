"""Enumerations for domain models."""

from enum import Enum

from lendwatch.core.exceptions import UnsupportedChainError


class EventKind(str, Enum):
    """Kinds of vault ledger events."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class SupportedChain(str, Enum):
    """Chains with deployed lending vaults."""

    ETHEREUM = "ethereum"
    ARBITRUM = "arbitrum"

    @classmethod
    def parse(cls, value: str) -> "SupportedChain":
        """
        Return the chain for an identifier.

        Raises:
            UnsupportedChainError: if value names no supported chain
        """
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedChainError(str(value)) from None


class CacheNamespace(str, Enum):
    """Cache key namespaces; each has its own freshness window."""

    LENDING = "lending"
    SAVINGS = "savings"
    SAVINGS_INFOS = "savings-infos"
