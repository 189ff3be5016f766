"""
Issuance Ledger - Ledger Manager

This module provides the manager that rebuilds a ledger and its
collaborators from storage, runs operations against it, and persists the
result only when the operation completes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from ledger.core import IssuanceLedger
from ledger.events import DEFAULT_MAX_EVENTS, EventLog, LedgerEvent
from ledger.treasury import AccountBook

from .ownership import InMemoryOwnershipRegistry
from .schema import IssuanceConfig, LedgerSnapshot
from .storage import LedgerStorage


T = TypeVar("T")


class LedgerExistsError(Exception):
    """A ledger already exists in the storage directory."""
    pass


@dataclass
class LedgerSession:
    """A loaded ledger together with its collaborators."""
    ledger: IssuanceLedger
    registry: InMemoryOwnershipRegistry
    account_book: AccountBook
    event_log: EventLog
    created_at: Optional[datetime] = None


class LedgerManager:
    """Loads, operates on, and persists a single ledger."""

    def __init__(
        self,
        storage_dir: Union[str, Path] = "ledger_data",
        backup_count: int = 5,
        lock_timeout: float = 10.0,
        max_events: int = DEFAULT_MAX_EVENTS
    ):
        self.logger = logging.getLogger("registry.manager")
        self.max_events = max_events
        self.storage = LedgerStorage(storage_dir, backup_count=backup_count, lock_timeout=lock_timeout)

    def exists(self) -> bool:
        return self.storage.exists()

    def create(
        self,
        owner: str,
        max_supply: int,
        base_uri: str = "",
        unit_price: Optional[int] = None,
        name: Optional[str] = None,
        symbol: Optional[str] = None
    ) -> LedgerSession:
        """Create and persist a new ledger."""
        if not owner:
            raise ValueError("Owner must be a non-empty account")

        fields: Dict[str, Any] = {'max_supply': max_supply, 'base_metadata_pointer': base_uri}
        if unit_price is not None:
            fields['unit_price'] = unit_price
        if name is not None:
            fields['name'] = name
        if symbol is not None:
            fields['symbol'] = symbol
        config = IssuanceConfig(**fields)

        with self.storage.locked():
            if self.storage.exists():
                raise LedgerExistsError(f"A ledger already exists in {self.storage.storage_dir}")

            snapshot = LedgerSnapshot(config=config, owner=owner)
            self.storage.save_snapshot(snapshot)

        self.logger.info(
            f"Created ledger '{config.name}' owned by {owner} with max supply {max_supply}"
        )
        return self._session_from_snapshot(snapshot)

    def load(self) -> LedgerSession:
        """Load the stored ledger."""
        return self._session_from_snapshot(self.storage.load_snapshot())

    def transact(self, operation: Callable[[LedgerSession], T]) -> T:
        """
        Run an operation against the stored ledger under the storage lock.

        The resulting state is written back only if the operation returns
        normally; an exception leaves storage untouched and propagates.
        """
        with self.storage.locked():
            session = self._session_from_snapshot(self.storage.load_snapshot())
            result = operation(session)
            self.storage.save_snapshot(self.snapshot(session))
        return result

    def snapshot(self, session: LedgerSession) -> LedgerSnapshot:
        """Capture the full state of a session."""
        ledger = session.ledger
        fields: Dict[str, Any] = {}
        if session.created_at is not None:
            fields['created_at'] = session.created_at

        return LedgerSnapshot(
            config=ledger.config.model_copy(),
            owner=ledger.owner,
            paused=ledger.paused,
            next_id=ledger.current_token_id,
            allowlist=ledger.allowlist_members(),
            treasury_balance=ledger.treasury_balance,
            holders=session.registry.holders(),
            account_credits=session.account_book.credits(),
            events=[e.to_dict() for e in session.event_log.events()],
            **fields
        )

    def _session_from_snapshot(self, snapshot: LedgerSnapshot) -> LedgerSession:
        event_log = EventLog(
            [LedgerEvent.from_dict(e) for e in snapshot.events],
            max_events=self.max_events,
        )
        registry = InMemoryOwnershipRegistry(snapshot.holders, event_sink=event_log)
        account_book = AccountBook(snapshot.account_credits)

        ledger = IssuanceLedger.restore(
            config=snapshot.config.model_copy(),
            owner=snapshot.owner,
            registry=registry,
            next_id=snapshot.next_id,
            paused=snapshot.paused,
            allowlist=snapshot.allowlist,
            treasury_balance=snapshot.treasury_balance,
            payout=account_book,
            event_sink=event_log,
        )
        return LedgerSession(
            ledger=ledger,
            registry=registry,
            account_book=account_book,
            event_log=event_log,
            created_at=snapshot.created_at,
        )

    def list_backups(self) -> List[str]:
        return self.storage.list_backups()

    def get_stats(self) -> Dict[str, Any]:
        session = self.load()
        stats = session.ledger.get_info()
        stats['event_count'] = len(session.event_log)
        stats['holder_count'] = len(set(session.registry.holders().values()))
        stats['storage_info'] = self.storage.get_storage_info()
        return stats
