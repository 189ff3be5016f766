"""
Issuance Ledger

Policy layer for token issuance: owner and pause gates, a capped global
supply counter, a one-shot free-mint allow-list, and a withdrawable treasury.
The orchestrating IssuanceLedger lives in ledger.core.
"""

from .exceptions import (
    LedgerError,
    Unauthorized,
    Paused,
    NotListed,
    IncorrectPayment,
    InsufficientPayment,
    InvalidCount,
    BatchTooLarge,
    TooManyAccounts,
    CapacityExceeded,
    NoSuchAsset,
    AlreadyExists,
    TransferFailed
)

from .events import EventType, LedgerEvent, EventSink, EventLog
from .access import AccessGate, PauseGate
from .supply import SupplyCounter
from .allowlist import AllowlistRegistry, MAX_ALLOWLIST_BATCH
from .treasury import PayoutBackend, AccountBook, Treasury

__all__ = [
    "LedgerError",
    "Unauthorized",
    "Paused",
    "NotListed",
    "IncorrectPayment",
    "InsufficientPayment",
    "InvalidCount",
    "BatchTooLarge",
    "TooManyAccounts",
    "CapacityExceeded",
    "NoSuchAsset",
    "AlreadyExists",
    "TransferFailed",
    "EventType",
    "LedgerEvent",
    "EventSink",
    "EventLog",
    "AccessGate",
    "PauseGate",
    "SupplyCounter",
    "AllowlistRegistry",
    "MAX_ALLOWLIST_BATCH",
    "PayoutBackend",
    "AccountBook",
    "Treasury"
]

__version__ = '1.0.0'
