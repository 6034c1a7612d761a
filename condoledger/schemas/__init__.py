"""Pydantic schemas for ledger, payment and audit operations."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from condoledger.services.clock import ensure_utc

# Datetimes read back from SQLite are naive; everything stored is UTC.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

__all__ = ["UtcDatetime"]
