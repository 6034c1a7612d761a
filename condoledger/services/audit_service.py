"""Audit service for payment lifecycle events."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from condoledger.models.audit_entry import AuditAction, PaymentAuditEntry
from condoledger.schemas.audit import AuditEntryView
from condoledger.services.db import read_session


class AuditService:
    """Service for audit trail operations.

    Entries are only appended from inside a payment mutation's transaction
    and are never updated or deleted afterwards.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize with a session factory.

        Args:
            session_factory: Factory for read sessions
        """
        self.session_factory = session_factory

    @staticmethod
    def append(
        db: Session,
        payment_id: int,
        action: AuditAction,
        detail: str,
        recorded_at: datetime,
        acting_user_id: int | None = None,
    ) -> PaymentAuditEntry:
        """Add an audit entry to the caller's open transaction.

        The caller has already established that the payment exists within
        the same transaction.

        Args:
            db: Session of the running unit of work
            payment_id: Payment the entry belongs to
            action: CREATE, EDIT or DEACTIVATE
            detail: Human-readable description of the change
            recorded_at: Timestamp of the action
            acting_user_id: User who performed the action (optional)

        Returns:
            Created PaymentAuditEntry object
        """
        entry = PaymentAuditEntry(
            payment_id=payment_id,
            action=action,
            detail=detail,
            acting_user_id=acting_user_id,
            recorded_at=recorded_at,
        )
        db.add(entry)
        return entry

    def list_for(self, payment_id: int) -> list[AuditEntryView]:
        """List audit entries for a payment, newest first.

        Args:
            payment_id: Payment ID

        Returns:
            List of AuditEntryView ordered by recorded_at descending
        """
        with read_session(self.session_factory) as db:
            stmt = (
                select(PaymentAuditEntry)
                .where(PaymentAuditEntry.payment_id == payment_id)
                .order_by(PaymentAuditEntry.recorded_at.desc(), PaymentAuditEntry.id.desc())
            )
            entries = db.execute(stmt).scalars().all()
            return [AuditEntryView.model_validate(entry) for entry in entries]


__all__ = ["AuditService"]
