"""
Issuance Ledger - Ownership Registry

This module provides the asset-ownership collaborator that records which
account holds each issued identifier. The ledger consumes it through the
narrow OwnershipRegistry interface.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from ledger.events import EventSink, holder_changed
from ledger.exceptions import AlreadyExists, NoSuchAsset, Unauthorized


class OwnershipRegistry(ABC):
    """Interface the ledger requires from an ownership registry."""

    @abstractmethod
    def mint(self, to: str, token_id: int) -> None:
        """Record to as holder of token_id. Raises AlreadyExists if held."""
        pass

    @abstractmethod
    def mint_batch(self, to: str, token_ids: Sequence[int], notify: bool = True) -> None:
        """
        Record to as holder of every id, all-or-nothing.

        With notify=False no holder-changed notifications are emitted; the
        caller is then responsible for announcing the new holders.
        """
        pass

    @abstractmethod
    def revoke_batch(self, token_ids: Sequence[int]) -> None:
        """Forget the holders of freshly recorded ids when issuance is undone."""
        pass

    @abstractmethod
    def owner_of(self, token_id: int) -> str:
        """Return the holder of token_id. Raises NoSuchAsset if unissued."""
        pass

    @abstractmethod
    def holds_any(self, account: str) -> bool:
        pass

    def exists(self, token_id: int) -> bool:
        try:
            self.owner_of(token_id)
        except NoSuchAsset:
            return False
        return True


class InMemoryOwnershipRegistry(OwnershipRegistry):
    """Dict-backed ownership registry emitting holder-changed notifications."""

    def __init__(
        self,
        holders: Optional[Dict[int, str]] = None,
        event_sink: Optional[EventSink] = None
    ):
        self.logger = logging.getLogger("registry.ownership")
        self.event_sink = event_sink
        self._holders: Dict[int, str] = {}
        self._balances: Dict[str, int] = defaultdict(int)

        for token_id, account in (holders or {}).items():
            self._record(int(token_id), account)

    def _record(self, token_id: int, account: str) -> None:
        previous = self._holders.get(token_id)
        if previous is not None:
            self._balances[previous] -= 1
            if self._balances[previous] == 0:
                del self._balances[previous]
        self._holders[token_id] = account
        self._balances[account] += 1

    def _notify(self, token_id: int, from_account: Optional[str], to_account: str) -> None:
        if self.event_sink is not None:
            self.event_sink.emit(holder_changed(token_id, from_account, to_account))

    def mint(self, to: str, token_id: int) -> None:
        self.mint_batch(to, [token_id])

    def mint_batch(self, to: str, token_ids: Sequence[int], notify: bool = True) -> None:
        if not to:
            raise ValueError("Cannot mint to an empty account")

        # Validate every id before recording any of them
        seen = set()
        for token_id in token_ids:
            if token_id in self._holders or token_id in seen:
                raise AlreadyExists(token_id)
            seen.add(token_id)

        for token_id in token_ids:
            self._record(token_id, to)
        if notify:
            for token_id in token_ids:
                self._notify(token_id, None, to)

        self.logger.debug(f"Recorded {len(token_ids)} new tokens for {to}")

    def revoke_batch(self, token_ids: Sequence[int]) -> None:
        for token_id in token_ids:
            holder = self._holders.pop(token_id, None)
            if holder is None:
                continue
            self._balances[holder] -= 1
            if self._balances[holder] == 0:
                del self._balances[holder]

        self.logger.debug(f"Revoked {len(token_ids)} token(s)")

    def owner_of(self, token_id: int) -> str:
        try:
            return self._holders[token_id]
        except KeyError:
            raise NoSuchAsset(token_id) from None

    def exists(self, token_id: int) -> bool:
        return token_id in self._holders

    def holds_any(self, account: str) -> bool:
        return self._balances.get(account, 0) > 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def tokens_of(self, account: str) -> List[int]:
        return sorted(t for t, holder in self._holders.items() if holder == account)

    def transfer(self, caller: str, to: str, token_id: int) -> None:
        """Move token_id from its current holder to another account."""
        holder = self.owner_of(token_id)
        if caller != holder:
            raise Unauthorized(caller, f"Caller {caller!r} does not hold token {token_id}")
        if not to:
            raise ValueError("Cannot transfer to an empty account")

        self._record(token_id, to)
        self._notify(token_id, holder, to)
        self.logger.info(f"Token {token_id} transferred from {holder} to {to}")

    def holders(self) -> Dict[int, str]:
        return dict(self._holders)
