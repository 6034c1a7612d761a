"""Owner registry used by the ledger and payment services."""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from condoledger.models import LedgerAccount, Owner, Payment
from condoledger.schemas.ledger import OwnerCreate, OwnerView
from condoledger.services.db import read_session, unit_of_work
from condoledger.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class OwnerService:
    """Minimal administrative operations on owners."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def create(self, fields: OwnerCreate) -> OwnerView:
        """Register a new owner."""
        with unit_of_work(self.session_factory) as db:
            owner = Owner(name=fields.name.strip(), email=fields.email, phone=fields.phone)
            db.add(owner)
            db.flush()
            view = OwnerView.model_validate(owner)
        logger.info(f"Created owner: {view.name} (ID={view.id})")
        return view

    def get(self, owner_id: int) -> OwnerView:
        """Get owner by ID.

        Raises:
            NotFoundError: If the owner does not exist
        """
        with read_session(self.session_factory) as db:
            owner = db.get(Owner, owner_id)
            if owner is None:
                raise NotFoundError(f"Owner {owner_id} not found")
            return OwnerView.model_validate(owner)

    def list(self) -> List[OwnerView]:
        """List owners sorted by name."""
        with read_session(self.session_factory) as db:
            owners = db.execute(select(Owner).order_by(Owner.name, Owner.id)).scalars().all()
            return [OwnerView.model_validate(owner) for owner in owners]

    def delete(self, owner_id: int) -> None:
        """Delete an owner that nothing references any more.

        Raises:
            NotFoundError: If the owner does not exist
            ConflictError: If the owner still has a ledger account or payments
        """
        with unit_of_work(self.session_factory) as db:
            owner = db.get(Owner, owner_id)
            if owner is None:
                raise NotFoundError(f"Owner {owner_id} not found")
            has_account = db.execute(
                select(LedgerAccount.id).where(LedgerAccount.owner_id == owner_id)
            ).first()
            if has_account:
                raise ConflictError(f"Owner {owner_id} still has a ledger account")
            payment_count = db.execute(
                select(func.count(Payment.id)).where(Payment.owner_id == owner_id)
            ).scalar_one()
            if payment_count:
                raise ConflictError(f"Owner {owner_id} is referenced by {payment_count} payments")
            db.delete(owner)
        logger.info(f"Deleted owner ID={owner_id}")


__all__ = ["OwnerService"]
