"""
Tests for the in-memory ownership registry.
"""

import pytest

from ledger.events import EventType
from ledger.exceptions import AlreadyExists, NoSuchAsset, Unauthorized


class TestOwnershipRegistryMinting:

    def test_mint_records_holder(self, ownership_registry, event_log):
        ownership_registry.mint("bob", 1)

        assert ownership_registry.owner_of(1) == "bob"
        assert ownership_registry.holds_any("bob")
        assert ownership_registry.balance_of("bob") == 1

        event = event_log.events()[0]
        assert event.event_type == EventType.HOLDER_CHANGED
        assert event.from_account is None
        assert event.to_account == "bob"

    def test_mint_batch(self, ownership_registry):
        ownership_registry.mint_batch("bob", [1, 2, 3])

        assert ownership_registry.tokens_of("bob") == [1, 2, 3]

    def test_mint_batch_is_all_or_nothing(self, ownership_registry, event_log):
        ownership_registry.mint("bob", 2)

        with pytest.raises(AlreadyExists):
            ownership_registry.mint_batch("carol", [1, 2, 3])

        assert not ownership_registry.exists(1)
        assert not ownership_registry.holds_any("carol")
        assert len(event_log) == 1

    def test_mint_batch_without_notifications(self, ownership_registry, event_log):
        ownership_registry.mint_batch("bob", [1, 2], notify=False)

        assert ownership_registry.tokens_of("bob") == [1, 2]
        assert len(event_log) == 0

    def test_revoke_batch(self, ownership_registry):
        ownership_registry.mint("bob", 1)
        ownership_registry.mint_batch("carol", [2, 3])

        ownership_registry.revoke_batch([2, 3, 99])

        assert ownership_registry.holders() == {1: "bob"}
        assert not ownership_registry.holds_any("carol")
        ownership_registry.mint("dave", 2)
        assert ownership_registry.owner_of(2) == "dave"

    def test_mint_to_empty_account(self, ownership_registry):
        with pytest.raises(ValueError):
            ownership_registry.mint("", 1)

    def test_owner_of_unknown(self, ownership_registry):
        with pytest.raises(NoSuchAsset):
            ownership_registry.owner_of(99)


class TestOwnershipRegistryTransfer:

    def test_transfer(self, ownership_registry, event_log):
        ownership_registry.mint("bob", 1)
        ownership_registry.transfer("bob", "carol", 1)

        assert ownership_registry.owner_of(1) == "carol"
        assert not ownership_registry.holds_any("bob")

        event = event_log.events()[-1]
        assert (event.from_account, event.to_account) == ("bob", "carol")

    def test_transfer_by_non_holder(self, ownership_registry):
        ownership_registry.mint("bob", 1)

        with pytest.raises(Unauthorized):
            ownership_registry.transfer("mallory", "mallory", 1)
        assert ownership_registry.owner_of(1) == "bob"

    def test_holders_snapshot(self, ownership_registry):
        ownership_registry.mint_batch("bob", [1, 2])

        assert ownership_registry.holders() == {1: "bob", 2: "bob"}
