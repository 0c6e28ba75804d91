"""Core utilities and shared functionality."""

from lendwatch.core.timezone import (
    now_utc,
    to_utc,
    to_epoch_ms,
    from_epoch_ms,
    parse_datetime_utc,
    UTC,
)
from lendwatch.core.exceptions import (
    AppError,
    ValidationError,
    InvalidAddressError,
    UnsupportedChainError,
    ConfigurationError,
    UpstreamFetchError,
    ComputeError,
)
from lendwatch.core.addresses import is_address, normalize_address

__all__ = [
    "now_utc",
    "to_utc",
    "to_epoch_ms",
    "from_epoch_ms",
    "parse_datetime_utc",
    "UTC",
    "AppError",
    "ValidationError",
    "InvalidAddressError",
    "UnsupportedChainError",
    "ConfigurationError",
    "UpstreamFetchError",
    "ComputeError",
    "is_address",
    "normalize_address",
]
