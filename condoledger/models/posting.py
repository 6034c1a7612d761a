"""Posting ORM model for credit/debit entries against a ledger account."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoledger.models import Base, BaseModel


class PostingKind(str, Enum):
    """Direction of a posting."""

    CREDIT = "CREDIT"
    """Money entering the account (balance goes up)."""

    DEBIT = "DEBIT"
    """Money leaving the account (balance goes down)."""

    @classmethod
    def parse(cls, value: "str | PostingKind") -> "PostingKind":
        """Parse a posting kind case-insensitively.

        Accepts the canonical names and the Portuguese labels used by
        older clients ("credito", "DEBITO").

        Raises:
            ValueError: If the value is not a known posting kind
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        kind = _POSTING_KIND_ALIASES.get(key)
        if kind is None:
            raise ValueError(f"Unknown posting kind: {value!r}")
        return kind

    def sign(self, amount: Decimal) -> Decimal:
        """Return ``amount`` with the sign this kind applies to a balance."""
        return amount if self is PostingKind.CREDIT else -amount


_POSTING_KIND_ALIASES = {
    "CREDIT": PostingKind.CREDIT,
    "CREDITO": PostingKind.CREDIT,
    "CRÉDITO": PostingKind.CREDIT,
    "DEBIT": PostingKind.DEBIT,
    "DEBITO": PostingKind.DEBIT,
    "DÉBITO": PostingKind.DEBIT,
}


class Posting(Base, BaseModel):
    """Immutable credit or debit against a ledger account.

    ``amount`` is always a non-negative magnitude; the sign comes from
    ``kind``. Postings are only written together with the matching
    balance update on their account.
    """

    __tablename__ = "postings"

    account_id: Mapped[int] = mapped_column(
        ForeignKey("ledger_accounts.id"),
        nullable=False,
        index=True,
        comment="Ledger account the posting belongs to",
    )
    kind: Mapped[PostingKind] = mapped_column(
        SAEnum(PostingKind, native_enum=False, length=10),
        nullable=False,
        comment="CREDIT or DEBIT",
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        comment="Magnitude of the posting",
    )
    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Free-text description",
    )
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the movement happened",
    )

    # Relationships
    account: Mapped["LedgerAccount"] = relationship(  # noqa: F821
        "LedgerAccount",
        back_populates="postings",
        foreign_keys=[account_id],
    )

    __table_args__ = (Index("idx_posting_account_occurred", "account_id", "occurred_at"),)

    @property
    def signed_amount(self) -> Decimal:
        return self.kind.sign(self.amount)

    def __repr__(self) -> str:
        return (
            f"<Posting(id={self.id}, account_id={self.account_id}, "
            f"kind={self.kind}, amount={self.amount})>"
        )


__all__ = ["Posting", "PostingKind"]
