"""
Unit tests for the LedgerManager.
"""

import pytest

from ledger.events import EventType
from ledger.exceptions import CapacityExceeded, Paused
from registry.manager import LedgerExistsError, LedgerManager
from registry.storage import LedgerNotInitializedError


PRICE = 50_000_000_000_000_000


class TestLedgerCreation:

    def test_create(self, ledger_manager):
        session = ledger_manager.create(owner="alice", max_supply=3, base_uri="ipfs://x/")

        assert ledger_manager.exists()
        assert session.ledger.owner == "alice"
        assert session.ledger.max_supply == 3
        assert session.ledger.price == PRICE

    def test_create_with_overrides(self, ledger_manager):
        session = ledger_manager.create(
            owner="alice", max_supply=3, unit_price=10, name="Drops", symbol="drp"
        )

        assert session.ledger.price == 10
        assert session.ledger.name == "Drops"
        assert session.ledger.symbol == "DRP"

    def test_create_twice(self, initialized_manager):
        with pytest.raises(LedgerExistsError):
            initialized_manager.create(owner="bob", max_supply=5)

    def test_create_without_owner(self, ledger_manager):
        with pytest.raises(ValueError):
            ledger_manager.create(owner="", max_supply=5)
        assert not ledger_manager.exists()

    def test_load_uninitialized(self, ledger_manager):
        with pytest.raises(LedgerNotInitializedError):
            ledger_manager.load()


class TestLedgerTransactions:

    def test_transact_persists_state(self, initialized_manager):
        token_ids = initialized_manager.transact(lambda s: s.ledger.mint("bob", PRICE))
        initialized_manager.transact(lambda s: s.ledger.add_to_allowlist("alice", "carol"))
        initialized_manager.transact(lambda s: s.ledger.pause("alice"))

        session = initialized_manager.load()
        assert token_ids == [1]
        assert session.ledger.owner_of(1) == "bob"
        assert session.ledger.current_token_id == 2
        assert session.ledger.treasury_balance == PRICE
        assert session.ledger.is_listed("carol")
        assert session.ledger.paused

    def test_failed_transact_leaves_storage_untouched(self, initialized_manager):
        initialized_manager.transact(lambda s: s.ledger.pause("alice"))
        before = initialized_manager.load().ledger.get_info()

        with pytest.raises(Paused):
            initialized_manager.transact(lambda s: s.ledger.mint("bob", PRICE))

        assert initialized_manager.load().ledger.get_info() == before

    def test_capacity_failure_is_not_persisted(self, initialized_manager):
        with pytest.raises(CapacityExceeded):
            initialized_manager.transact(lambda s: s.ledger.owner_claim_multiple("alice", 11))

        assert initialized_manager.load().ledger.current_token_id == 1

    def test_events_are_persisted(self, initialized_manager):
        initialized_manager.transact(lambda s: s.ledger.owner_claim_multiple("alice", 2))

        log = initialized_manager.load().event_log
        assert [e.event_type for e in log.events()] == [
            EventType.HOLDER_CHANGED, EventType.ASSET_CREATED,
            EventType.HOLDER_CHANGED, EventType.ASSET_CREATED,
        ]
        assert [e.sequence for e in log.events()] == [1, 2, 3, 4]

    def test_stored_events_are_bounded(self, ledger_dir):
        manager = LedgerManager(storage_dir=ledger_dir, max_events=4)
        manager.create(owner="alice", max_supply=10)

        manager.transact(lambda s: s.ledger.owner_claim_multiple("alice", 2))
        manager.transact(lambda s: s.ledger.owner_claim_multiple("alice", 2))

        snapshot = manager.storage.load_snapshot()
        assert [e["sequence"] for e in snapshot.events] == [5, 6, 7, 8]
        assert [e["token_id"] for e in snapshot.events] == [3, 3, 4, 4]

    def test_withdraw_credits_owner_account(self, initialized_manager):
        initialized_manager.transact(lambda s: s.ledger.mint_multiple("bob", 2, PRICE * 2))
        amount = initialized_manager.transact(lambda s: s.ledger.withdraw("alice"))

        session = initialized_manager.load()
        assert amount == PRICE * 2
        assert session.ledger.treasury_balance == 0
        assert session.account_book.balance_of("alice") == PRICE * 2

    def test_transfer_persists(self, initialized_manager):
        initialized_manager.transact(lambda s: s.ledger.mint("bob", PRICE))
        initialized_manager.transact(lambda s: s.registry.transfer("bob", "carol", 1))

        assert initialized_manager.load().ledger.owner_of(1) == "carol"

    def test_created_at_is_preserved(self, initialized_manager):
        created_at = initialized_manager.load().created_at
        initialized_manager.transact(lambda s: s.ledger.owner_claim("alice"))

        assert initialized_manager.load().created_at == created_at


class TestLedgerStats:

    def test_get_stats(self, initialized_manager):
        initialized_manager.transact(lambda s: s.ledger.safe_mint("alice", "bob"))
        initialized_manager.transact(lambda s: s.ledger.owner_claim("alice"))

        stats = initialized_manager.get_stats()
        assert stats['total_issued'] == 2
        assert stats['holder_count'] == 2
        assert stats['event_count'] == 4
        assert stats['storage_info']['backups'] >= 1
        assert initialized_manager.list_backups()
