"""Pydantic schemas for the payment lifecycle."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from condoledger.models.payment import PaymentState
from condoledger.schemas import UtcDatetime


class PaymentCreate(BaseModel):
    """Fields accepted when registering a payment."""

    amount: Decimal | int | float | str = Field(
        ..., description="Amount, as a number or locale-formatted string"
    )
    description: str | None = Field(None, description="What the payment is for")
    state: PaymentState = Field(PaymentState.PENDING, description="Initial state")
    issued_at: UtcDatetime | None = Field(None, description="Issue date (default: now)")
    due_at: UtcDatetime | None = Field(None, description="Due date")
    owner_id: int | None = Field(None, description="Owner billed")
    fraction_id: int | None = Field(None, description="Fraction (unit) reference")
    tenant_id: int | None = Field(None, description="Tenant reference")

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value):
        if value is None:
            return PaymentState.PENDING
        return PaymentState.parse(value)


class PaymentUpdate(BaseModel):
    """Partial update of a payment.

    Only fields explicitly provided are applied; absent fields keep their
    current value. An explicit None clears nullable fields (description,
    due_at, associations) and is ignored for amount, state and issued_at.
    """

    amount: Decimal | int | float | str | None = None
    description: str | None = None
    state: PaymentState | None = None
    issued_at: UtcDatetime | None = None
    due_at: UtcDatetime | None = None
    owner_id: int | None = None
    fraction_id: int | None = None
    tenant_id: int | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value):
        if value is None:
            return None
        return PaymentState.parse(value)

    def provided(self) -> dict:
        """Fields explicitly set by the caller, with their values."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class PaymentFilter(BaseModel):
    """Listing filter. ``active=None`` lists active and inactive payments."""

    active: bool | None = True
    state: PaymentState | None = None
    owner_id: int | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value):
        if value is None:
            return None
        return PaymentState.parse(value)


class Pagination(BaseModel):
    """Page selection for listings (pages start at 1)."""

    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=500)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PaymentRecord(BaseModel):
    """Stored payment fields."""

    id: int
    amount: Decimal
    description: str | None = None
    state: PaymentState
    issued_at: UtcDatetime
    due_at: UtcDatetime | None = None
    active: bool
    owner_id: int | None = None
    fraction_id: int | None = None
    tenant_id: int | None = None
    user_id: int | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class PaymentView(PaymentRecord):
    """Payment with derived display fields attached (never persisted)."""

    status_label: str
    amount_display: str
    issued_on: str
    due_on: str | None = None


class PaymentPage(BaseModel):
    """One page of a payment listing."""

    items: list[PaymentView]
    total_count: int
    page: int
    page_size: int
    total_pages: int


__all__ = [
    "PaymentCreate",
    "PaymentUpdate",
    "PaymentFilter",
    "Pagination",
    "PaymentRecord",
    "PaymentView",
    "PaymentPage",
]
