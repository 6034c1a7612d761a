"""Pydantic schemas for the payment audit trail."""

from pydantic import BaseModel, ConfigDict

from condoledger.models.audit_entry import AuditAction
from condoledger.schemas import UtcDatetime


class AuditEntryView(BaseModel):
    """Audit entry as returned by the audit trail."""

    id: int
    payment_id: int
    action: AuditAction
    detail: str
    acting_user_id: int | None = None
    recorded_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


__all__ = ["AuditEntryView"]
