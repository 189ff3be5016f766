"""
Issuance Ledger - Exceptions

This module defines the error taxonomy raised by ledger operations. Every
error aborts the triggering call with no partial effect.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for all ledger errors."""
    pass


class Unauthorized(LedgerError):
    """Raised when the caller lacks the required role."""

    def __init__(self, caller: Optional[str], message: str = None):
        self.caller = caller
        if message is None:
            message = f"Caller {caller!r} is not the owner"
        super().__init__(message)


class Paused(LedgerError):
    """Raised when issuance is attempted while the ledger is paused."""

    def __init__(self, message: str = "Issuance is paused"):
        super().__init__(message)


class NotListed(LedgerError):
    """Raised when a free mint is attempted by an account not on the allow-list."""

    def __init__(self, account: str, message: str = None):
        self.account = account
        if message is None:
            message = f"Account {account!r} is not on the allow-list"
        super().__init__(message)


class IncorrectPayment(LedgerError):
    """Raised when the paid value does not satisfy a single-issuance payment rule."""

    def __init__(self, required: int, received: int, message: str = None):
        self.required = required
        self.received = received
        if message is None:
            message = f"Payment value is not correct: required {required}, received {received}"
        super().__init__(message)


class InsufficientPayment(LedgerError):
    """Raised when a batch payment is lower than price times count."""

    def __init__(self, required: int, received: int, message: str = None):
        self.required = required
        self.received = received
        if message is None:
            message = f"Payment is not enough: required {required}, received {received}"
        super().__init__(message)


class InvalidCount(LedgerError):
    """Raised when a requested quantity is less than one."""

    def __init__(self, count: int, message: str = None):
        self.count = count
        if message is None:
            message = f"The minimum is one token, got {count}"
        super().__init__(message)


class BatchTooLarge(LedgerError):
    """Raised when a public batch mint exceeds the per-call cap."""

    def __init__(self, count: int, limit: int, message: str = None):
        self.count = count
        self.limit = limit
        if message is None:
            message = f"You can mint a max of {limit} tokens, requested {count}"
        super().__init__(message)


class TooManyAccounts(LedgerError):
    """Raised when an allow-list batch update exceeds its cap."""

    def __init__(self, count: int, limit: int, message: str = None):
        self.count = count
        self.limit = limit
        if message is None:
            message = f"Too many accounts: {count} exceeds the limit of {limit}"
        super().__init__(message)


class CapacityExceeded(LedgerError):
    """Raised when issuance would exceed the maximum supply."""

    def __init__(self, requested: int, remaining: int, message: str = None):
        self.requested = requested
        self.remaining = remaining
        if message is None:
            message = f"Exceeds maximum supply: requested {requested}, remaining {remaining}"
        super().__init__(message)


class NoSuchAsset(LedgerError):
    """Raised on lookup of an identifier that has not been issued."""

    def __init__(self, token_id: int, message: str = None):
        self.token_id = token_id
        if message is None:
            message = f"Token {token_id} does not exist"
        super().__init__(message)


class AlreadyExists(LedgerError):
    """Raised by the ownership registry when an identifier already has a holder."""

    def __init__(self, token_id: int, message: str = None):
        self.token_id = token_id
        if message is None:
            message = f"Token {token_id} already has a holder"
        super().__init__(message)


class TransferFailed(LedgerError):
    """Raised when the withdrawal transfer fails. The held balance is left intact."""

    def __init__(self, to: Optional[str], amount: int, message: str = None):
        self.to = to
        self.amount = amount
        if message is None:
            message = f"Transfer of {amount} to {to!r} failed"
        super().__init__(message)
