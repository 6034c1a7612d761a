"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from condoledger.models.owner import Owner  # noqa: E402
from condoledger.models.account import LedgerAccount  # noqa: E402
from condoledger.models.posting import Posting, PostingKind  # noqa: E402
from condoledger.models.payment import Payment, PaymentState  # noqa: E402
from condoledger.models.audit_entry import AuditAction, PaymentAuditEntry  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "utcnow",
    "Owner",
    "LedgerAccount",
    "Posting",
    "PostingKind",
    "Payment",
    "PaymentState",
    "PaymentAuditEntry",
    "AuditAction",
]
