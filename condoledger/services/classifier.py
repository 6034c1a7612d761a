"""Derived status labels for payments.

The label is computed from the payment state and due date relative to a
``now`` snapshot. It is attached to read results and never stored.

Day counts round up while the due date is in the future and round down
once it has passed, so a payment due in 2.1 days is "3 days until due" and
one overdue by 15.9 days is still "15 days" overdue.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from condoledger.models.payment import Payment, PaymentState
from condoledger.services.clock import ensure_utc

ONE_DAY = timedelta(days=1)

LABEL_PAID = "Paid"
LABEL_NO_DUE_DATE = "No due date set"


@dataclass(frozen=True)
class ClassifierPolicy:
    """Overdue bucket boundaries, in whole days overdue (inclusive)."""

    mild_max_days: int = 15
    moderate_max_days: int = 30


DEFAULT_POLICY = ClassifierPolicy()


def days_until_due(due_at: datetime, now: datetime) -> int:
    """Whole days left before ``due_at``, rounded up."""
    return math.ceil((ensure_utc(due_at) - ensure_utc(now)) / ONE_DAY)


def days_overdue(due_at: datetime, now: datetime) -> int:
    """Whole days elapsed since ``due_at``, rounded down."""
    return math.floor((ensure_utc(now) - ensure_utc(due_at)) / ONE_DAY)


def classify(
    state: PaymentState | str,
    due_at: datetime | None,
    now: datetime,
    policy: ClassifierPolicy = DEFAULT_POLICY,
) -> str:
    """Classify a payment into a human-readable status.

    Args:
        state: Payment state
        due_at: Due date, or None
        now: Single time snapshot used for the whole classification
        policy: Overdue bucket boundaries

    Returns:
        Status label, e.g. "Pending (3 days until due)" or
        "Moderately overdue (20 days)"
    """
    if PaymentState.parse(state) is PaymentState.PAID:
        return LABEL_PAID
    if due_at is None:
        return LABEL_NO_DUE_DATE

    if ensure_utc(now) < ensure_utc(due_at):
        return f"Pending ({days_until_due(due_at, now)} days until due)"

    overdue = days_overdue(due_at, now)
    if overdue <= policy.mild_max_days:
        return f"Mildly overdue ({overdue} days)"
    if overdue <= policy.moderate_max_days:
        return f"Moderately overdue ({overdue} days)"
    return f"Severely overdue ({overdue} days)"


def classify_payment(
    payment: Payment, now: datetime, policy: ClassifierPolicy = DEFAULT_POLICY
) -> str:
    """Classify a Payment row against ``now``."""
    return classify(payment.state, payment.due_at, now, policy)


__all__ = [
    "ClassifierPolicy",
    "DEFAULT_POLICY",
    "LABEL_PAID",
    "LABEL_NO_DUE_DATE",
    "classify",
    "classify_payment",
    "days_overdue",
    "days_until_due",
]
