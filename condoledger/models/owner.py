"""Owner ORM model for condominium unit owners."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoledger.models import Base, BaseModel


class Owner(Base, BaseModel):
    """Model representing a unit owner.

    An owner holds at most one ledger account. Payments reference owners
    by id only; nothing is cascaded from an owner automatically.
    """

    __tablename__ = "owners"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Full name of the owner",
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Contact email",
    )
    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Contact phone number",
    )

    # Relationships
    account: Mapped["LedgerAccount | None"] = relationship(  # noqa: F821
        "LedgerAccount",
        back_populates="owner",
        uselist=False,
    )

    __table_args__ = (Index("idx_owner_name", "name"),)

    def __repr__(self) -> str:
        return f"<Owner(id={self.id}, name={self.name!r})>"


__all__ = ["Owner"]
