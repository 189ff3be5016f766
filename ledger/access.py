"""
Issuance Ledger - Access and Pause Gates

The access gate restricts operations to a single owner principal. The pause
gate globally blocks issuance while tripped. Both are pure precondition
checks evaluated before any state mutation.
"""

import logging
from typing import Optional

from .exceptions import Unauthorized, Paused


class AccessGate:
    """Single-owner access control."""

    def __init__(self, owner: Optional[str]):
        self.logger = logging.getLogger("ledger.access")
        self._owner = owner

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    def is_owner(self, caller: Optional[str]) -> bool:
        return self._owner is not None and caller == self._owner

    def require_owner(self, caller: Optional[str]) -> None:
        """Raise Unauthorized unless caller is the owner."""
        if not self.is_owner(caller):
            self.logger.warning(f"Rejected owner-only call from {caller!r}")
            raise Unauthorized(caller)

    def transfer_ownership(self, caller: str, new_owner: str) -> Optional[str]:
        """Hand the owner role to new_owner. Returns the previous owner."""
        self.require_owner(caller)
        if not new_owner:
            raise ValueError("New owner must be a non-empty account")

        previous, self._owner = self._owner, new_owner
        self.logger.info(f"Ownership transferred from {previous} to {new_owner}")
        return previous

    def renounce_ownership(self, caller: str) -> Optional[str]:
        """Leave the ledger without an owner. Returns the previous owner."""
        self.require_owner(caller)
        previous, self._owner = self._owner, None
        self.logger.info(f"Ownership renounced by {previous}")
        return previous


class PauseGate:
    """Emergency stop for issuance paths."""

    def __init__(self, paused: bool = False):
        self._paused = paused

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def unpause(self) -> None:
        self._paused = False

    def require_not_paused(self) -> None:
        if self._paused:
            raise Paused()
