"""
Tests for ledger notifications and the in-memory event log.
"""

from ledger.events import (
    EventLog,
    EventType,
    LedgerEvent,
    asset_created,
    holder_changed,
)


class TestLedgerEvent:

    def test_timestamp_is_filled(self):
        event = asset_created(1, "bob")

        assert event.event_type == EventType.ASSET_CREATED
        assert event.timestamp is not None
        assert event.sequence is None

    def test_dict_conversion(self):
        event = holder_changed(3, "bob", "carol")
        data = event.to_dict()

        assert data["event_type"] == "holder_changed"
        assert data["from_account"] == "bob"

        restored = LedgerEvent.from_dict(data)
        assert restored == event


class TestEventLog:

    def test_sequence_numbers(self):
        log = EventLog()
        log.emit(asset_created(1, "bob"))
        log.emit(asset_created(2, "bob"))

        assert [e.sequence for e in log.events()] == [1, 2]
        assert len(log) == 2

    def test_sequence_continues_after_restore(self):
        log = EventLog([LedgerEvent(EventType.PAUSED, sequence=7)])
        log.emit(LedgerEvent(EventType.UNPAUSED))

        assert log.events()[-1].sequence == 8

    def test_filtering(self):
        log = EventLog()
        log.emit(holder_changed(1, None, "bob"))
        log.emit(asset_created(1, "bob"))
        log.emit(asset_created(2, "bob"))

        assert len(log.events(event_type=EventType.ASSET_CREATED)) == 2
        assert len(log.events(token_id=1)) == 2
        assert len(log.events(event_type=EventType.HOLDER_CHANGED, token_id=2)) == 0

    def test_retention_drops_oldest(self):
        log = EventLog(max_events=3)
        for token_id in range(1, 6):
            log.emit(asset_created(token_id, "bob"))

        assert [e.token_id for e in log.events()] == [3, 4, 5]
        assert [e.sequence for e in log.events()] == [3, 4, 5]

    def test_retention_applies_to_restored_events(self):
        restored = [LedgerEvent(EventType.PAUSED, sequence=n) for n in range(1, 6)]
        log = EventLog(restored, max_events=2)

        assert [e.sequence for e in log.events()] == [4, 5]
        log.emit(LedgerEvent(EventType.UNPAUSED))
        assert [e.sequence for e in log.events()] == [5, 6]
