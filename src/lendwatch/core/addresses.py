"""EVM address validation and normalization."""

from web3 import Web3

from lendwatch.core.exceptions import InvalidAddressError


def is_address(value: str) -> bool:
    """Return True if value is a hex address (any casing, valid checksum if mixed-case)."""
    if not isinstance(value, str):
        return False
    return Web3.is_address(value)


def normalize_address(value: str) -> str:
    """
    Validate and return the EIP-55 checksummed form of an address.

    Raises:
        InvalidAddressError: if value is not an address
    """
    if not is_address(value):
        raise InvalidAddressError(str(value))
    return Web3.to_checksum_address(value)
