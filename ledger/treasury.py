"""
Issuance Ledger - Treasury

Accumulates value received by paid issuance paths and releases it to the
owner on withdrawal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .exceptions import TransferFailed


class PayoutBackend(ABC):
    """Mechanism that moves withdrawn value to an account."""

    @abstractmethod
    def send(self, to: str, amount: int) -> bool:
        """
        Transfer amount to the account.

        Returns:
            True on success. A False return or a raised exception means the
            transfer did not happen.
        """
        pass


class AccountBook(PayoutBackend):
    """In-memory per-account credit book."""

    def __init__(self, credits: Optional[Dict[str, int]] = None):
        self._credits: Dict[str, int] = dict(credits or {})

    def send(self, to: str, amount: int) -> bool:
        if not to or amount < 0:
            return False
        self._credits[to] = self._credits.get(to, 0) + amount
        return True

    def balance_of(self, account: str) -> int:
        return self._credits.get(account, 0)

    def credits(self) -> Dict[str, int]:
        return dict(self._credits)


class Treasury:
    """Held paid-in balance, owned by the ledger until withdrawn."""

    def __init__(self, backend: PayoutBackend, balance: int = 0):
        if balance < 0:
            raise ValueError(f"Treasury balance cannot be negative: {balance}")

        self.logger = logging.getLogger("ledger.treasury")
        self.backend = backend
        self._balance = balance

    @property
    def balance(self) -> int:
        return self._balance

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot credit a negative amount: {amount}")
        self._balance += amount

    def withdraw(self, to: Optional[str]) -> int:
        """
        Send the entire held balance to the account and reset it to zero.

        The balance is only cleared after the backend confirms the transfer,
        so a failed withdrawal can be retried.

        Returns:
            The amount withdrawn
        """
        amount = self._balance
        if amount == 0:
            return 0

        try:
            sent = self.backend.send(to, amount)
        except Exception as e:
            self.logger.warning(f"Withdrawal of {amount} to {to} failed: {e}")
            raise TransferFailed(to, amount) from e

        if not sent:
            self.logger.warning(f"Withdrawal of {amount} to {to} was refused by the backend")
            raise TransferFailed(to, amount)

        self._balance = 0
        self.logger.info(f"Withdrew {amount} to {to}")
        return amount
