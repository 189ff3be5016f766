"""
Issuance Ledger - Supply Counter

Assigns identifiers from a single global counter and enforces the maximum
supply cap. An identifier is issued iff 1 <= id < next_id.
"""

import logging
from typing import List

from .exceptions import CapacityExceeded, InvalidCount


class SupplyCounter:
    """
    Monotonic identifier counter bounded by a maximum supply.

    Reservation is check-then-commit: the post-reservation counter value is
    computed and validated against the cap before next_id changes, so a
    rejected batch never leaves the counter partially advanced.
    """

    def __init__(self, max_supply: int, next_id: int = 1):
        if max_supply < 1:
            raise ValueError(f"max_supply must be at least 1, got {max_supply}")
        if next_id < 1 or next_id > max_supply + 1:
            raise ValueError(
                f"next_id {next_id} outside valid range 1..{max_supply + 1}"
            )

        self.logger = logging.getLogger("ledger.supply")
        self.max_supply = max_supply
        self._next_id = next_id

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def total_issued(self) -> int:
        return self._next_id - 1

    @property
    def remaining(self) -> int:
        return self.max_supply - self.total_issued

    def is_issued(self, token_id: int) -> bool:
        return 1 <= token_id < self._next_id

    def check_batch(self, count: int) -> List[int]:
        """Validate a reservation of count ids and return them without reserving."""
        if count < 1:
            raise InvalidCount(count)
        if self.total_issued + count > self.max_supply:
            raise CapacityExceeded(requested=count, remaining=self.remaining)
        return list(range(self._next_id, self._next_id + count))

    def reserve_next(self) -> int:
        """Reserve and return the next identifier."""
        return self.reserve_batch(1)[0]

    def reserve_batch(self, count: int) -> List[int]:
        """Atomically reserve count consecutive identifiers."""
        ids = self.check_batch(count)
        self._next_id = ids[-1] + 1

        self.logger.debug(
            f"Reserved ids {ids[0]}..{ids[-1]}, next_id={self._next_id}, "
            f"remaining={self.remaining}"
        )
        return ids
