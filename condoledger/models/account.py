"""Ledger account ORM model holding an owner's running balance."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoledger.models import Base, BaseModel


class LedgerAccount(Base, BaseModel):
    """Model representing an owner's running account.

    ``current_balance`` is a cached value: after every committed ledger
    operation it equals the signed sum of the account's postings, the
    opening posting included.

    Postings are not cascaded on delete. Removing them is an explicit,
    separate step taken before the account can be closed.
    """

    __tablename__ = "ledger_accounts"

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("owners.id"),
        nullable=False,
        unique=True,
        index=True,
        comment="Owner of the account (1:1)",
    )

    initial_balance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Balance the account was opened with",
    )
    current_balance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Running balance maintained by postings",
    )

    # Relationships
    owner: Mapped["Owner"] = relationship(  # noqa: F821
        "Owner",
        back_populates="account",
        foreign_keys=[owner_id],
    )
    postings: Mapped[list["Posting"]] = relationship(  # noqa: F821
        "Posting",
        back_populates="account",
        order_by="Posting.occurred_at",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerAccount(id={self.id}, owner_id={self.owner_id}, "
            f"current_balance={self.current_balance})>"
        )


__all__ = ["LedgerAccount"]
