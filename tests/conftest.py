"""
Pytest configuration and fixtures for Issuance Ledger tests.
"""

import pytest

from ledger.core import IssuanceLedger
from ledger.events import EventLog
from ledger.treasury import AccountBook
from registry.manager import LedgerManager
from registry.ownership import InMemoryOwnershipRegistry
from registry.schema import DEFAULT_UNIT_PRICE, IssuanceConfig


OWNER = "alice"
PRICE = DEFAULT_UNIT_PRICE
BASE_URI = "https://baseUri/"


@pytest.fixture
def issuance_config():
    """Configuration with a small cap for testing."""
    return IssuanceConfig(max_supply=10, base_metadata_pointer=BASE_URI)


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def ownership_registry(event_log):
    return InMemoryOwnershipRegistry(event_sink=event_log)


@pytest.fixture
def account_book():
    return AccountBook()


@pytest.fixture
def ledger(issuance_config, ownership_registry, account_book, event_log):
    """Ledger owned by OWNER with a cap of 10."""
    return IssuanceLedger(
        issuance_config,
        OWNER,
        ownership_registry,
        payout=account_book,
        event_sink=event_log,
    )


@pytest.fixture
def make_ledger(account_book, event_log):
    """Factory for ledgers with a custom cap and price."""
    def _make(max_supply=10, unit_price=PRICE, owner=OWNER):
        config = IssuanceConfig(
            max_supply=max_supply,
            unit_price=unit_price,
            base_metadata_pointer=BASE_URI,
        )
        registry = InMemoryOwnershipRegistry(event_sink=event_log)
        return IssuanceLedger(config, owner, registry, payout=account_book, event_sink=event_log)

    return _make


@pytest.fixture
def ledger_dir(tmp_path):
    """Empty ledger data directory."""
    return tmp_path / "ledger_data"


@pytest.fixture
def ledger_manager(ledger_dir):
    return LedgerManager(storage_dir=ledger_dir, lock_timeout=2.0)


@pytest.fixture
def initialized_manager(ledger_manager):
    """Manager with a stored ledger owned by OWNER."""
    ledger_manager.create(owner=OWNER, max_supply=10, base_uri=BASE_URI)
    return ledger_manager
