"""Domain model, address and settings tests."""

from decimal import Decimal

import pytest

from lendwatch.config.settings import Settings
from lendwatch.core.addresses import is_address, normalize_address
from lendwatch.core.exceptions import (
    ComputeError,
    ConfigurationError,
    InvalidAddressError,
    UnsupportedChainError,
    UpstreamFetchError,
)
from lendwatch.domain.models import (
    PositionSnapshot,
    ProgressWatermark,
    SupportedChain,
)

from tests.conftest import USER, VAULT_A, deposit, vault_descriptor, withdraw


class TestPositionSnapshot:
    """Test snapshot serialization and metadata."""

    def test_dict_round_trip_keeps_decimals(self):
        """Test amounts survive serialization exactly."""
        snapshot = PositionSnapshot(
            vault=VAULT_A,
            redeem_value=Decimal("100.000000000000000001"),
            deposited=Decimal("99.5"),
            earnings=Decimal("0.500000000000000001"),
            events=(withdraw("0.5", 20), deposit(100, 10)),
        ).with_vault(vault_descriptor(VAULT_A))

        restored = PositionSnapshot.from_dict(snapshot.to_dict())

        assert restored == snapshot
        assert snapshot.to_dict()["redeem_value"] == "100.000000000000000001"

    def test_with_vault_attaches_metadata(self):
        snapshot = PositionSnapshot(vault=VAULT_A).with_vault(vault_descriptor(VAULT_A, apr="7.5"))

        assert snapshot.apr == Decimal("7.5")
        assert snapshot.collateral_symbol == "WETH"
        assert snapshot.is_empty


class TestProgressWatermark:
    """Test watermark decoding."""

    def test_from_bare_block(self):
        assert ProgressWatermark.from_data(19500000).last_processed_ordinal == 19500000

    def test_from_document(self):
        watermark = ProgressWatermark.from_data({"last_processed_ordinal": 42})

        assert watermark == ProgressWatermark(last_processed_ordinal=42)


class TestAddresses:
    """Test address validation."""

    def test_lowercase_address_is_checksummed(self):
        assert normalize_address(VAULT_A.lower()) == VAULT_A

    @pytest.mark.parametrize("value", ["", "0x", "0x1234", "hello", "0x" + "zz" * 20, None])
    def test_invalid_addresses(self, value):
        assert not is_address(value)
        with pytest.raises(InvalidAddressError):
            normalize_address(value)

    def test_bad_checksum_is_rejected(self):
        # Flip the case of one letter of a checksummed address
        index = next(i for i, c in enumerate(VAULT_A) if i > 1 and c.isalpha())
        broken = VAULT_A[:index] + VAULT_A[index].swapcase() + VAULT_A[index + 1:]

        assert not is_address(broken)


class TestSupportedChain:
    """Test chain parsing."""

    def test_parse_known(self):
        assert SupportedChain.parse("arbitrum") is SupportedChain.ARBITRUM

    @pytest.mark.parametrize("value", ["Ethereum", "polygon", ""])
    def test_parse_unknown(self, value):
        with pytest.raises(UnsupportedChainError):
            SupportedChain.parse(value)


class TestErrors:
    """Test error status mapping."""

    def test_status_codes(self):
        assert InvalidAddressError(USER).status_code == 400
        assert UnsupportedChainError("x").status_code == 400
        assert ConfigurationError("X").status_code == 500
        assert UpstreamFetchError("Event source", "timeout").status_code == 502
        assert ComputeError("bad").status_code == 500


class TestSettings:
    """Test settings accessors."""

    def test_missing_cache_url(self):
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None, cache_url=None).get_cache_url()

    def test_rpc_url_per_chain(self):
        settings = Settings(_env_file=None, ethereum_rpc_url="https://eth.example", arbitrum_rpc_url=None)

        assert settings.get_rpc_url("ethereum") == "https://eth.example"
        with pytest.raises(ConfigurationError):
            settings.get_rpc_url("arbitrum")

    def test_default_freshness_windows(self):
        settings = Settings(_env_file=None)

        assert settings.freshness_minutes == {"lending": 60, "savings": 60, "savings-infos": 20}
