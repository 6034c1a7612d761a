"""Payment service for the payment record lifecycle.

Provides methods for:
- Creating payments
- Updating payments with a field-level audit diff
- Deactivating payments (soft delete) and purging deactivated ones
- Paginated listing with derived status labels and formatted amounts

Each mutation and its audit entry are committed in one transaction.
"""

import logging
import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from condoledger.models import AuditAction, Owner, Payment, PaymentAuditEntry, PaymentState
from condoledger.schemas.payment import (
    Pagination,
    PaymentCreate,
    PaymentFilter,
    PaymentPage,
    PaymentRecord,
    PaymentUpdate,
    PaymentView,
)
from condoledger.services.audit_service import AuditService
from condoledger.services.classifier import DEFAULT_POLICY, ClassifierPolicy, classify_payment
from condoledger.services.clock import Clock, SystemClock, ensure_utc
from condoledger.services.db import read_session, unit_of_work
from condoledger.services.errors import ConflictError, InvalidAmountError, NotFoundError
from condoledger.services.locale_service import MoneyFormat, MoneyInput

logger = logging.getLogger(__name__)

MISSING_VALUE = "—"

# Audited fields and their labels in the EDIT detail, in display order
AUDITED_FIELDS = {
    "amount": "Amount",
    "state": "State",
    "description": "Description",
    "due_at": "Due date",
}

# Fields that an explicit None clears
NULLABLE_FIELDS = ("description", "due_at", "owner_id", "fraction_id", "tenant_id")


class PaymentService:
    """Payment lifecycle operations."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        money: Optional[MoneyFormat] = None,
        clock: Optional[Clock] = None,
        policy: ClassifierPolicy = DEFAULT_POLICY,
        audit: Optional[AuditService] = None,
        default_page_size: int = 20,
    ):
        """Initialize payment service.

        Args:
            session_factory: Factory producing one session per operation
            money: Amount parser/formatter (default: MoneyFormat())
            clock: Source of "now" (default: SystemClock())
            policy: Overdue bucket boundaries for status labels
            audit: Audit trail writer (default: AuditService on the same factory)
            default_page_size: Page size used when list() gets no pagination
        """
        self.session_factory = session_factory
        self.money = money or MoneyFormat()
        self.clock = clock or SystemClock()
        self.policy = policy
        self.audit = audit or AuditService(session_factory)
        self.default_page_size = default_page_size

    def create(self, fields: PaymentCreate, acting_user_id: Optional[int] = None) -> PaymentView:
        """Register a payment and record a CREATE audit entry.

        Args:
            fields: Payment fields; state defaults to PENDING, issued_at to now
            acting_user_id: User registering the payment (optional)

        Returns:
            Created payment

        Raises:
            InvalidAmountError: If the amount is not a positive number
            NotFoundError: If the referenced owner does not exist
        """
        amount = self._positive_amount(fields.amount)
        now = self.clock.now()

        with unit_of_work(self.session_factory) as db:
            self._check_owner(db, fields.owner_id)
            payment = Payment(
                amount=amount,
                description=fields.description,
                state=fields.state,
                issued_at=fields.issued_at or now,
                due_at=fields.due_at,
                active=True,
                owner_id=fields.owner_id,
                fraction_id=fields.fraction_id,
                tenant_id=fields.tenant_id,
                user_id=acting_user_id,
            )
            db.add(payment)
            db.flush()
            self.audit.append(
                db,
                payment.id,
                AuditAction.CREATE,
                f"Payment of {self.money.format(amount)} created",
                recorded_at=now,
                acting_user_id=acting_user_id,
            )
            view = self._view(payment, now)

        logger.info(f"Created payment ID={view.id}: amount={amount}, state={view.state.value}")
        return view

    def update(
        self,
        payment_id: int,
        fields: PaymentUpdate,
        acting_user_id: Optional[int] = None,
    ) -> PaymentView:
        """Update a payment, auditing changes to amount, state, description and due date.

        Fields not provided keep their current value. When none of the
        audited fields changes, no audit entry is written.

        Args:
            payment_id: Payment ID (active or deactivated)
            fields: Partial update
            acting_user_id: User performing the update (optional)

        Returns:
            Updated payment

        Raises:
            NotFoundError: If the payment or a referenced owner does not exist
            InvalidAmountError: If a new amount is not a positive number
        """
        provided = fields.provided()
        new_amount = None
        if provided.get("amount") is not None:
            new_amount = self._positive_amount(provided["amount"])
        now = self.clock.now()

        with unit_of_work(self.session_factory) as db:
            payment = self._lock(db, payment_id)
            if provided.get("owner_id") is not None:
                self._check_owner(db, provided["owner_id"])

            before = self._snapshot(payment)
            if new_amount is not None:
                payment.amount = new_amount
            if provided.get("state") is not None:
                payment.state = PaymentState.parse(provided["state"])
            if provided.get("issued_at") is not None:
                payment.issued_at = provided["issued_at"]
            for name in NULLABLE_FIELDS:
                if name in provided:
                    setattr(payment, name, provided[name])

            changes = self._describe_changes(before, self._snapshot(payment))
            if changes:
                self.audit.append(
                    db,
                    payment.id,
                    AuditAction.EDIT,
                    ", ".join(changes),
                    recorded_at=now,
                    acting_user_id=acting_user_id,
                )
            db.flush()
            view = self._view(payment, now)

        if changes:
            logger.info(f"Updated payment ID={payment_id}: {', '.join(changes)}")
        else:
            logger.debug(f"Update of payment ID={payment_id} changed no audited field")
        return view

    def deactivate(self, payment_id: int, acting_user_id: Optional[int] = None) -> PaymentView:
        """Soft-delete a payment and record a DEACTIVATE audit entry.

        Every call is audited, including repeats on an inactive payment.

        Raises:
            NotFoundError: If the payment does not exist
        """
        now = self.clock.now()
        with unit_of_work(self.session_factory) as db:
            payment = self._lock(db, payment_id)
            payment.active = False
            self.audit.append(
                db,
                payment.id,
                AuditAction.DEACTIVATE,
                "Payment deactivated",
                recorded_at=now,
                acting_user_id=acting_user_id,
            )
            db.flush()
            view = self._view(payment, now)

        logger.info(f"Deactivated payment ID={payment_id} (user_id={acting_user_id})")
        return view

    def purge(self, payment_id: int) -> None:
        """Permanently remove a deactivated payment and its audit entries.

        Privileged operation outside the audited lifecycle.

        Raises:
            NotFoundError: If the payment does not exist
            ConflictError: If the payment is still active
        """
        with unit_of_work(self.session_factory) as db:
            payment = self._lock(db, payment_id)
            if payment.active:
                raise ConflictError(f"Payment {payment_id} must be deactivated before purging")
            db.execute(
                delete(PaymentAuditEntry)
                .where(PaymentAuditEntry.payment_id == payment_id)
                .execution_options(synchronize_session=False)
            )
            db.delete(payment)

        logger.warning(f"Purged payment ID={payment_id} and its audit trail")

    def get(self, payment_id: int) -> PaymentView:
        """Get payment by ID, active or not.

        Raises:
            NotFoundError: If the payment does not exist
        """
        now = self.clock.now()
        with read_session(self.session_factory) as db:
            payment = db.get(Payment, payment_id)
            if payment is None:
                raise NotFoundError(f"Payment {payment_id} not found")
            return self._view(payment, now)

    def list_deactivated(self) -> List[PaymentView]:
        """List deactivated payments, most recently issued first."""
        now = self.clock.now()
        with read_session(self.session_factory) as db:
            payments = db.execute(
                select(Payment)
                .where(Payment.active.is_(False))
                .order_by(Payment.issued_at.desc(), Payment.id.desc())
            ).scalars().all()
            return [self._view(payment, now) for payment in payments]

    def total_paid_by_owner(self, owner_id: int) -> Decimal:
        """Sum of active PAID payments billed to an owner."""
        with read_session(self.session_factory) as db:
            result = db.execute(
                select(func.sum(Payment.amount)).where(
                    Payment.owner_id == owner_id,
                    Payment.state == PaymentState.PAID,
                    Payment.active.is_(True),
                )
            ).scalar()
            return Decimal(result or 0)

    def list(
        self,
        filter: Optional[PaymentFilter] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaymentPage:
        """List payments, most recently issued first.

        All payments of the page are classified against one ``now``.

        Args:
            filter: active/state/owner filter (default: active payments)
            pagination: Page selection (default: first page)

        Returns:
            PaymentPage with items, total_count and total_pages
        """
        filter = filter or PaymentFilter()
        pagination = pagination or Pagination(page_size=self.default_page_size)
        now = self.clock.now()

        conditions = []
        if filter.active is not None:
            conditions.append(Payment.active.is_(filter.active))
        if filter.state is not None:
            conditions.append(Payment.state == filter.state)
        if filter.owner_id is not None:
            conditions.append(Payment.owner_id == filter.owner_id)

        with read_session(self.session_factory) as db:
            total = db.execute(select(func.count(Payment.id)).where(*conditions)).scalar_one()
            payments = db.execute(
                select(Payment)
                .where(*conditions)
                .order_by(Payment.issued_at.desc(), Payment.id.desc())
                .offset(pagination.offset)
                .limit(pagination.page_size)
            ).scalars().all()
            items = [self._view(payment, now) for payment in payments]

        return PaymentPage(
            items=items,
            total_count=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=math.ceil(total / pagination.page_size),
        )

    def _positive_amount(self, amount: MoneyInput) -> Decimal:
        try:
            return self.money.parse_positive(amount, what="Payment amount")
        except InvalidAmountError:
            logger.error(f"Invalid payment amount: {amount!r}")
            raise

    @staticmethod
    def _check_owner(db: Session, owner_id: Optional[int]) -> None:
        if owner_id is not None and db.get(Owner, owner_id) is None:
            raise NotFoundError(f"Owner {owner_id} not found")

    @staticmethod
    def _lock(db: Session, payment_id: int) -> Payment:
        payment = db.execute(
            select(Payment).where(Payment.id == payment_id).with_for_update()
        ).scalar_one_or_none()
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    @staticmethod
    def _snapshot(payment: Payment) -> Dict[str, Any]:
        return {
            "amount": Decimal(payment.amount),
            "state": PaymentState.parse(payment.state),
            "description": payment.description or None,
            "due_at": ensure_utc(payment.due_at),
        }

    def _describe_changes(self, before: Dict[str, Any], after: Dict[str, Any]) -> List[str]:
        changes = []
        for name, label in AUDITED_FIELDS.items():
            if before[name] != after[name]:
                changes.append(
                    f"{label}: {self._display(name, before[name])} → {self._display(name, after[name])}"
                )
        return changes

    def _display(self, name: str, value: Any) -> str:
        if value is None or value == "":
            return MISSING_VALUE
        if name == "amount":
            return self.money.format(value)
        if name == "state":
            return value.value
        if isinstance(value, datetime):
            return value.isoformat(sep=" ", timespec="minutes")
        return str(value)

    def _view(self, payment: Payment, now: datetime) -> PaymentView:
        record = PaymentRecord.model_validate(payment)
        return PaymentView(
            **record.model_dump(),
            status_label=classify_payment(payment, now, self.policy),
            amount_display=self.money.format(record.amount),
            issued_on=record.issued_at.date().isoformat(),
            due_on=record.due_at.date().isoformat() if record.due_at else None,
        )


__all__ = ["PaymentService", "AUDITED_FIELDS"]
