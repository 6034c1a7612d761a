"""Audit entry model for tracking payment lifecycle events."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoledger.models import Base, BaseModel


class AuditAction(str, Enum):
    """Lifecycle actions recorded for a payment."""

    CREATE = "CREATE"
    EDIT = "EDIT"
    DEACTIVATE = "DEACTIVATE"


class PaymentAuditEntry(Base, BaseModel):
    """Append-only audit entry for a payment.

    Records who (acting_user_id) did what (action) to which payment, with a
    human-readable description of the change (detail).
    """

    __tablename__ = "payment_audit_entries"

    payment_id: Mapped[int] = mapped_column(
        ForeignKey("payments.id"),
        nullable=False,
        index=True,
    )
    """Payment this entry belongs to."""

    action: Mapped[AuditAction] = mapped_column(
        SAEnum(AuditAction, native_enum=False, length=20),
        nullable=False,
    )
    """Action performed: CREATE, EDIT or DEACTIVATE."""

    detail: Mapped[str] = mapped_column(Text, nullable=False)
    """Description of the change, e.g. "State: PENDING → PAID"."""

    acting_user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    """User who performed the action. None for system actions."""

    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """When the action was recorded."""

    payment: Mapped["Payment"] = relationship(  # noqa: F821
        "Payment",
        back_populates="audit_entries",
        foreign_keys=[payment_id],
    )

    __table_args__ = (Index("idx_audit_payment_recorded", "payment_id", "recorded_at"),)

    def __repr__(self) -> str:
        return (
            f"<PaymentAuditEntry(id={self.id}, payment_id={self.payment_id}, "
            f"action={self.action}, acting_user_id={self.acting_user_id}, "
            f"recorded_at={self.recorded_at})>"
        )


__all__ = ["AuditAction", "PaymentAuditEntry"]
