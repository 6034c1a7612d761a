"""Pydantic schemas for owners, ledger accounts and postings."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from condoledger.models.posting import PostingKind
from condoledger.schemas import UtcDatetime


class OwnerCreate(BaseModel):
    """Fields accepted when registering an owner."""

    name: str = Field(..., min_length=1, description="Full name")
    email: str | None = Field(None, description="Contact email")
    phone: str | None = Field(None, description="Contact phone")


class OwnerView(BaseModel):
    """Owner as returned by the registry."""

    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class AccountView(BaseModel):
    """Ledger account with formatted balances attached."""

    id: int
    owner_id: int
    initial_balance: Decimal
    current_balance: Decimal
    created_at: UtcDatetime
    initial_balance_display: str
    current_balance_display: str


class PostingView(BaseModel):
    """Posting with formatted amount attached."""

    id: int
    account_id: int
    kind: PostingKind
    amount: Decimal
    signed_amount: Decimal
    description: str | None = None
    occurred_at: UtcDatetime
    amount_display: str
    occurred_on: str


class BalanceCheck(BaseModel):
    """Result of reconciling a cached balance against its postings."""

    account_id: int
    current_balance: Decimal
    postings_total: Decimal
    posting_count: int

    @property
    def consistent(self) -> bool:
        return self.current_balance == self.postings_total


__all__ = [
    "OwnerCreate",
    "OwnerView",
    "AccountView",
    "PostingView",
    "BalanceCheck",
]
