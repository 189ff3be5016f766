"""
Unit tests for registry schema models.
"""

import pytest
from pydantic import ValidationError

from registry.schema import DEFAULT_UNIT_PRICE, IssuanceConfig, LedgerSnapshot


class TestIssuanceConfig:
    """Test IssuanceConfig model."""

    def test_defaults(self):
        config = IssuanceConfig(max_supply=100)

        assert config.name == "NFTBoilerplate"
        assert config.symbol == "NFT"
        assert config.unit_price == DEFAULT_UNIT_PRICE == 50_000_000_000_000_000
        assert config.base_metadata_pointer == ""

    def test_symbol_normalized(self):
        assert IssuanceConfig(max_supply=1, symbol="abc").symbol == "ABC"

    def test_invalid_symbol(self):
        with pytest.raises(ValidationError):
            IssuanceConfig(max_supply=1, symbol="A-B")

    @pytest.mark.parametrize("max_supply", [0, -5])
    def test_invalid_max_supply(self, max_supply):
        with pytest.raises(ValidationError):
            IssuanceConfig(max_supply=max_supply)

    def test_max_supply_is_frozen(self):
        config = IssuanceConfig(max_supply=10)

        with pytest.raises(ValidationError):
            config.max_supply = 20

    def test_price_assignment_is_validated(self):
        config = IssuanceConfig(max_supply=10)
        config.unit_price = 0

        with pytest.raises(ValidationError):
            config.unit_price = -1
        assert config.unit_price == 0


class TestLedgerSnapshot:
    """Test LedgerSnapshot model."""

    def test_minimal_snapshot(self):
        snapshot = LedgerSnapshot(config=IssuanceConfig(max_supply=5), owner="alice")

        assert snapshot.next_id == 1
        assert not snapshot.paused
        assert snapshot.holders == {}
        assert snapshot.created_at is not None

    def test_json_round_trip_restores_int_keys(self):
        snapshot = LedgerSnapshot(
            config=IssuanceConfig(max_supply=5),
            owner="alice",
            next_id=3,
            holders={1: "bob", 2: "alice"},
        )

        restored = LedgerSnapshot.model_validate(snapshot.model_dump(mode='json'))

        assert restored.holders == {1: "bob", 2: "alice"}

    def test_next_id_beyond_cap(self):
        with pytest.raises(ValidationError, match="exceeds max_supply"):
            LedgerSnapshot(config=IssuanceConfig(max_supply=2), owner="alice", next_id=4)

    def test_holder_for_unissued_token(self):
        with pytest.raises(ValidationError, match="unissued token"):
            LedgerSnapshot(
                config=IssuanceConfig(max_supply=5),
                owner="alice",
                next_id=2,
                holders={2: "bob"},
            )

    def test_update_timestamp(self):
        snapshot = LedgerSnapshot(config=IssuanceConfig(max_supply=5), owner="alice")
        before = snapshot.updated_at
        snapshot.update_timestamp()

        assert snapshot.updated_at >= before
