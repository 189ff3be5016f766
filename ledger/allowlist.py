"""
Issuance Ledger - Allow-list Registry

Tracks accounts pre-approved for exactly one free issuance. Membership is
binary. An account that already holds an issued identifier is never admitted,
and an entry lapses once its account receives an asset by any route.
"""

import logging
from typing import Iterable, List, Protocol, Sequence, Set

from .exceptions import TooManyAccounts


MAX_ALLOWLIST_BATCH = 100


class HoldingsView(Protocol):
    """Read-only view of the ownership registry used for admission checks."""

    def holds_any(self, account: str) -> bool:
        ...


class AllowlistRegistry:
    """Set of accounts eligible for one free issuance each."""

    def __init__(self, holdings: HoldingsView, members: Iterable[str] = ()):
        self.logger = logging.getLogger("ledger.allowlist")
        self._holdings = holdings
        self._members: Set[str] = set(members)

    def is_listed(self, account: str) -> bool:
        return account in self._members and not self._holdings.holds_any(account)

    def members(self) -> List[str]:
        return sorted(a for a in self._members if not self._holdings.holds_any(a))

    def add(self, account: str) -> bool:
        """
        Admit account unless it already holds an asset.

        Returns:
            True if the account was inserted, False for the silent no-op
            (existing holder or already listed)
        """
        if self._holdings.holds_any(account):
            self.logger.debug(f"Skipping allow-list admission of {account}: already a holder")
            return False
        if account in self._members:
            return False

        self._members.add(account)
        return True

    def add_many(self, accounts: Sequence[str]) -> List[str]:
        """Apply add() to each account independently. Returns the inserted accounts."""
        self._check_batch_size(accounts)
        return [account for account in accounts if self.add(account)]

    def remove(self, account: str) -> bool:
        """Remove account. Removing a non-member is a no-op."""
        if account in self._members:
            self._members.discard(account)
            return True
        return False

    def remove_many(self, accounts: Sequence[str]) -> List[str]:
        self._check_batch_size(accounts)
        return [account for account in accounts if self.remove(account)]

    def consume(self, account: str) -> bool:
        """Clear account's entry after it received an issuance."""
        consumed = self.remove(account)
        if consumed:
            self.logger.debug(f"Consumed allow-list entry of {account}")
        return consumed

    def _check_batch_size(self, accounts: Sequence[str]) -> None:
        if len(accounts) > MAX_ALLOWLIST_BATCH:
            raise TooManyAccounts(len(accounts), MAX_ALLOWLIST_BATCH)

    def __len__(self) -> int:
        return len(self.members())
