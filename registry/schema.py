"""
Issuance Ledger - Registry Schema Models

This module defines the Pydantic models for the issuance configuration and
the persisted ledger snapshot.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# 0.05 of a coin denominated in 10**18 smallest units
DEFAULT_UNIT_PRICE = 50_000_000_000_000_000

SNAPSHOT_VERSION = "1.0.0"


class IssuanceConfig(BaseModel):
    """Issuance configuration. max_supply is fixed at creation."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(default="NFTBoilerplate", min_length=1, max_length=100)
    symbol: str = Field(default="NFT", min_length=1, max_length=10)
    max_supply: int = Field(..., ge=1, frozen=True, description="Maximum number of identifiers ever issued")
    unit_price: int = Field(default=DEFAULT_UNIT_PRICE, ge=0, description="Price per paid issuance in smallest units")
    base_metadata_pointer: str = Field(default="", description="Prefix joined with the id to form token metadata URIs")

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v):
        """Validate symbol format."""
        if not re.match(r'^[A-Za-z0-9]+$', v):
            raise ValueError('Symbol must contain only letters and numbers')
        return v.upper()


class LedgerSnapshot(BaseModel):
    """Complete persisted state of a ledger and its collaborators."""

    version: str = Field(default=SNAPSHOT_VERSION, description="Snapshot schema version")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    config: IssuanceConfig
    owner: Optional[str] = Field(None, description="Owner principal, None once renounced")
    paused: bool = Field(default=False)
    next_id: int = Field(default=1, ge=1)
    allowlist: List[str] = Field(default_factory=list)
    treasury_balance: int = Field(default=0, ge=0)

    holders: Dict[int, str] = Field(default_factory=dict, description="Issued id -> current holder")
    account_credits: Dict[str, int] = Field(default_factory=dict, description="Withdrawn value per account")
    events: List[Dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_counter_consistency(self):
        """Validate counter, cap and holder relationships."""
        if self.next_id > self.config.max_supply + 1:
            raise ValueError(
                f'next_id {self.next_id} exceeds max_supply {self.config.max_supply} + 1'
            )

        for token_id in self.holders:
            if not 1 <= token_id < self.next_id:
                raise ValueError(f'Holder recorded for unissued token {token_id}')

        return self

    def update_timestamp(self) -> None:
        """Update the last modified timestamp."""
        self.updated_at = datetime.utcnow()
