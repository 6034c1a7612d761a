"""Payment ORM model for billable records with a due date and lifecycle."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoledger.models import Base, BaseModel


class PaymentState(str, Enum):
    """Lifecycle state of a payment."""

    PENDING = "PENDING"
    """Issued and not yet settled."""

    PAID = "PAID"
    """Settled."""

    CANCELLED = "CANCELLED"
    """Voided by the administration; kept for the record."""

    @classmethod
    def parse(cls, value: "str | PaymentState") -> "PaymentState":
        """Parse a payment state case-insensitively.

        Raises:
            ValueError: If the value is not a known state
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        state = _PAYMENT_STATE_ALIASES.get(key)
        if state is None:
            raise ValueError(f"Unknown payment state: {value!r}")
        return state


_PAYMENT_STATE_ALIASES = {
    "PENDING": PaymentState.PENDING,
    "PENDENTE": PaymentState.PENDING,
    "PAID": PaymentState.PAID,
    "PAGO": PaymentState.PAID,
    "CANCELLED": PaymentState.CANCELLED,
    "CANCELED": PaymentState.CANCELLED,
    "CANCELADO": PaymentState.CANCELLED,
}


class Payment(Base, BaseModel):
    """Model representing a billable payment record.

    Payments are never hard-deleted through the lifecycle API: removal
    sets ``active`` to False. Fraction and tenant references are weak
    (plain ids owned by the administrative layer).
    """

    __tablename__ = "payments"

    amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        comment="Amount due",
    )
    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="What the payment is for",
    )
    state: Mapped[PaymentState] = mapped_column(
        SAEnum(PaymentState, native_enum=False, length=20),
        nullable=False,
        default=PaymentState.PENDING,
        comment="PENDING, PAID or CANCELLED",
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the payment was issued",
    )
    due_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Due date, if any",
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="False once the payment has been deactivated",
    )

    # Associations
    owner_id: Mapped[int | None] = mapped_column(
        ForeignKey("owners.id"),
        nullable=True,
        index=True,
        comment="Owner the payment is billed to",
    )
    fraction_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
        comment="Fraction (unit) the payment refers to",
    )
    tenant_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
        comment="Tenant the payment refers to",
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="User who registered the payment",
    )

    # Relationships
    owner: Mapped["Owner | None"] = relationship(  # noqa: F821
        "Owner",
        foreign_keys=[owner_id],
    )
    audit_entries: Mapped[list["PaymentAuditEntry"]] = relationship(  # noqa: F821
        "PaymentAuditEntry",
        back_populates="payment",
        passive_deletes="all",
    )

    __table_args__ = (
        Index("idx_payment_active_issued", "active", "issued_at"),
        Index("idx_payment_state", "state"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, amount={self.amount}, state={self.state}, "
            f"active={self.active})>"
        )


__all__ = ["Payment", "PaymentState"]
