"""
Issuance Ledger Core

This module provides the IssuanceLedger class that orchestrates every
issuance path and administrative operation. The ledger composes:
- Access gate (single owner)
- Pause gate (emergency stop for public issuance)
- Supply counter (global id assignment under a hard cap)
- Allow-list registry (one free issuance per listed account)
- Treasury (paid-in balance, owner withdrawal)

Every call is run-to-completion: either all of its effects are applied or
none are, and notifications are delivered only for completed calls.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from registry.ownership import OwnershipRegistry
from registry.schema import IssuanceConfig

from .access import AccessGate, PauseGate
from .allowlist import AllowlistRegistry
from .events import EventSink, EventType, LedgerEvent, asset_created, holder_changed
from .exceptions import (
    BatchTooLarge,
    IncorrectPayment,
    InsufficientPayment,
    InvalidCount,
    NoSuchAsset,
    NotListed,
)
from .supply import SupplyCounter
from .treasury import AccountBook, PayoutBackend, Treasury


MAX_MINT_PER_CALL = 20


class IssuanceLedger:
    """
    Token-issuance ledger.

    The acting principal is passed explicitly to every operation as caller.
    """

    def __init__(
        self,
        config: IssuanceConfig,
        owner: Optional[str],
        registry: OwnershipRegistry,
        payout: Optional[PayoutBackend] = None,
        event_sink: Optional[EventSink] = None
    ):
        """
        Initialize a new ledger.

        Args:
            config: Issuance configuration (max supply, price, base pointer)
            owner: Initial owner principal
            registry: Ownership registry recording holders
            payout: Backend used by withdrawals (defaults to an in-memory book)
            event_sink: Receiver of ledger notifications
        """
        self.logger = logging.getLogger("ledger.core")
        self.config = config
        self.registry = registry
        self.event_sink = event_sink

        self.access = AccessGate(owner)
        self.pause_gate = PauseGate()
        self.counter = SupplyCounter(config.max_supply)
        self.allowlist = AllowlistRegistry(registry)
        self.treasury = Treasury(payout if payout is not None else AccountBook())

        self._pending_events: Optional[List[LedgerEvent]] = None
        self._recorded_ids: List[int] = []

    @classmethod
    def restore(
        cls,
        config: IssuanceConfig,
        owner: Optional[str],
        registry: OwnershipRegistry,
        next_id: int = 1,
        paused: bool = False,
        allowlist: Sequence[str] = (),
        treasury_balance: int = 0,
        payout: Optional[PayoutBackend] = None,
        event_sink: Optional[EventSink] = None
    ) -> "IssuanceLedger":
        """Rebuild a ledger from previously persisted state."""
        ledger = cls(config, owner, registry, payout=payout, event_sink=event_sink)
        ledger.counter = SupplyCounter(config.max_supply, next_id=next_id)
        ledger.pause_gate = PauseGate(paused)
        ledger.allowlist = AllowlistRegistry(registry, allowlist)
        ledger.treasury = Treasury(ledger.treasury.backend, balance=treasury_balance)
        return ledger

    # ------------------------------------------------------------------
    # Transaction handling
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self):
        """Apply every effect of the enclosed block or none of them."""
        saved_next_id = self.counter.next_id
        saved_allowlist = self.allowlist.members()
        saved_balance = self.treasury.balance
        saved_paused = self.pause_gate.paused
        saved_owner = self.access.owner

        self._pending_events = []
        self._recorded_ids = []
        try:
            yield
        except Exception:
            # Holders recorded by this call are forgotten along with their ids
            self.registry.revoke_batch(self._recorded_ids)
            self._recorded_ids = []
            self.counter = SupplyCounter(self.config.max_supply, next_id=saved_next_id)
            self.allowlist = AllowlistRegistry(self.registry, saved_allowlist)
            self.treasury = Treasury(self.treasury.backend, balance=saved_balance)
            self.pause_gate = PauseGate(saved_paused)
            self.access = AccessGate(saved_owner)
            self._pending_events = None
            raise

        self._recorded_ids = []
        pending, self._pending_events = self._pending_events, None
        if self.event_sink is not None:
            for event in pending:
                try:
                    self.event_sink.emit(event)
                except Exception as e:
                    self.logger.error(f"Event sink failed for {event.event_type.value}: {e}")

    def _notify(self, event: LedgerEvent) -> None:
        self._pending_events.append(event)

    def _issue(self, to: str, count: int, payment: int = 0) -> List[int]:
        """
        Reserve ids, record the holder, consume the allow-list entry,
        credit payment and queue notifications. Must run inside a transaction.
        """
        token_ids = self.counter.reserve_batch(count)
        self.registry.mint_batch(to, token_ids, notify=False)
        self._recorded_ids.extend(token_ids)
        self.allowlist.consume(to)
        if payment:
            self.treasury.credit(payment)

        for token_id in token_ids:
            self._notify(holder_changed(token_id, None, to))
            self._notify(asset_created(token_id, to))

        self.logger.info(
            f"Issued {len(token_ids)} token(s) {token_ids[0]}..{token_ids[-1]} to {to}"
            + (f" for {payment}" if payment else "")
        )
        return token_ids

    # ------------------------------------------------------------------
    # Issuance paths
    # ------------------------------------------------------------------

    def mint(self, caller: str, value: int) -> List[int]:
        """Paid public mint of a single token. Overpayment is accepted."""
        with self._transaction():
            self.pause_gate.require_not_paused()
            price = self.config.unit_price
            if value < price:
                raise IncorrectPayment(required=price, received=value)
            return self._issue(caller, 1, payment=value)

    def mint_multiple(self, caller: str, count: int, value: int) -> List[int]:
        """Paid public batch mint of up to MAX_MINT_PER_CALL tokens."""
        with self._transaction():
            self.pause_gate.require_not_paused()
            if count < 1:
                raise InvalidCount(count)
            if count > MAX_MINT_PER_CALL:
                raise BatchTooLarge(count, MAX_MINT_PER_CALL)

            required = self.config.unit_price * count
            if value < required:
                raise InsufficientPayment(required=required, received=value)
            return self._issue(caller, count, payment=value)

    def whitelisted_mint(self, caller: str, value: int = 0) -> List[int]:
        """Free mint for an allow-listed caller. Consumes the caller's entry."""
        with self._transaction():
            if not self.allowlist.is_listed(caller):
                raise NotListed(caller)
            self.pause_gate.require_not_paused()
            if value != 0:
                raise IncorrectPayment(required=0, received=value)
            return self._issue(caller, 1)

    def owner_claim(self, caller: str) -> List[int]:
        """Free issuance of one token to the owner. Not pause-gated."""
        with self._transaction():
            self.access.require_owner(caller)
            return self._issue(caller, 1)

    def owner_claim_multiple(self, caller: str, count: int) -> List[int]:
        """Free issuance of count tokens to the owner. Not pause-gated."""
        with self._transaction():
            self.access.require_owner(caller)
            if count < 1:
                raise InvalidCount(count)
            return self._issue(caller, count)

    def safe_mint(self, caller: str, to: str) -> List[int]:
        """Owner-initiated free issuance of one token to another account."""
        with self._transaction():
            self.access.require_owner(caller)
            if not to:
                raise ValueError("Recipient must be a non-empty account")
            return self._issue(to, 1)

    # ------------------------------------------------------------------
    # Allow-list administration
    # ------------------------------------------------------------------

    def add_to_allowlist(self, caller: str, account: str) -> bool:
        with self._transaction():
            self.access.require_owner(caller)
            return self.allowlist.add(account)

    def add_many_to_allowlist(self, caller: str, accounts: Sequence[str]) -> List[str]:
        with self._transaction():
            self.access.require_owner(caller)
            added = self.allowlist.add_many(accounts)
            self.logger.info(f"Allow-listed {len(added)} of {len(accounts)} account(s)")
            return added

    def remove_from_allowlist(self, caller: str, account: str) -> bool:
        with self._transaction():
            self.access.require_owner(caller)
            return self.allowlist.remove(account)

    def remove_many_from_allowlist(self, caller: str, accounts: Sequence[str]) -> List[str]:
        with self._transaction():
            self.access.require_owner(caller)
            removed = self.allowlist.remove_many(accounts)
            self.logger.info(f"Removed {len(removed)} account(s) from the allow-list")
            return removed

    # ------------------------------------------------------------------
    # Owner administration
    # ------------------------------------------------------------------

    def pause(self, caller: str) -> None:
        with self._transaction():
            self.access.require_owner(caller)
            self.pause_gate.pause()
            self._notify(LedgerEvent(EventType.PAUSED, from_account=caller))
            self.logger.info(f"Issuance paused by {caller}")

    def unpause(self, caller: str) -> None:
        with self._transaction():
            self.access.require_owner(caller)
            self.pause_gate.unpause()
            self._notify(LedgerEvent(EventType.UNPAUSED, from_account=caller))
            self.logger.info(f"Issuance unpaused by {caller}")

    def set_price(self, caller: str, price: int) -> None:
        with self._transaction():
            self.access.require_owner(caller)
            self.config.unit_price = price
            self.logger.info(f"Unit price set to {price}")

    def set_base_uri(self, caller: str, base_uri: str) -> None:
        with self._transaction():
            self.access.require_owner(caller)
            self.config.base_metadata_pointer = base_uri
            self.logger.info(f"Base metadata pointer set to {base_uri!r}")

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._transaction():
            previous = self.access.transfer_ownership(caller, new_owner)
            self._notify(LedgerEvent(
                EventType.OWNERSHIP_TRANSFERRED,
                from_account=previous,
                to_account=new_owner,
            ))

    def renounce_ownership(self, caller: str) -> None:
        with self._transaction():
            previous = self.access.renounce_ownership(caller)
            self._notify(LedgerEvent(EventType.OWNERSHIP_TRANSFERRED, from_account=previous))

    def withdraw(self, caller: str) -> int:
        """Send the entire treasury balance to the owner."""
        with self._transaction():
            self.access.require_owner(caller)
            amount = self.treasury.withdraw(self.access.owner)
            if amount:
                self._notify(LedgerEvent(EventType.WITHDRAWAL, to_account=caller, amount=amount))
            return amount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def current_token_id(self) -> int:
        return self.counter.next_id

    @property
    def total_issued(self) -> int:
        return self.counter.total_issued

    @property
    def max_supply(self) -> int:
        return self.config.max_supply

    @property
    def price(self) -> int:
        return self.config.unit_price

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    @property
    def owner(self) -> Optional[str]:
        return self.access.owner

    @property
    def paused(self) -> bool:
        return self.pause_gate.paused

    @property
    def treasury_balance(self) -> int:
        return self.treasury.balance

    def is_listed(self, account: str) -> bool:
        return self.allowlist.is_listed(account)

    def allowlist_members(self) -> List[str]:
        return self.allowlist.members()

    def owner_of(self, token_id: int) -> str:
        return self.registry.owner_of(token_id)

    def token_uri(self, token_id: int) -> str:
        """Metadata pointer of an issued token: base pointer followed by the id."""
        if not self.counter.is_issued(token_id):
            raise NoSuchAsset(token_id)
        return f"{self.config.base_metadata_pointer}{token_id}"

    def get_info(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'symbol': self.symbol,
            'owner': self.owner,
            'paused': self.paused,
            'current_token_id': self.current_token_id,
            'total_issued': self.total_issued,
            'max_supply': self.max_supply,
            'remaining_supply': self.counter.remaining,
            'price': self.price,
            'base_metadata_pointer': self.config.base_metadata_pointer,
            'allowlist_size': len(self.allowlist),
            'treasury_balance': self.treasury_balance,
        }
