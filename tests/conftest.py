"""Pytest configuration: in-memory database, fixed clock and wired services."""

from datetime import datetime, timedelta, timezone

import pytest

from condoledger.schemas.ledger import OwnerCreate
from condoledger.services.audit_service import AuditService
from condoledger.services.config import Settings
from condoledger.services.db import create_engine_from_settings, create_session_factory, init_db
from condoledger.services.ledger_service import LedgerService
from condoledger.services.locale_service import MoneyFormat
from condoledger.services.owner_service import OwnerService
from condoledger.services.payment_service import PaymentService

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def settings():
    """Settings for an isolated in-memory database."""
    return Settings(database_url="sqlite:///:memory:", _env_file=None)


@pytest.fixture
def engine(settings):
    """In-memory engine with the schema created."""
    engine = create_engine_from_settings(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def money():
    return MoneyFormat()


@pytest.fixture
def owner_service(session_factory):
    return OwnerService(session_factory)


@pytest.fixture
def ledger_service(session_factory, money, clock):
    return LedgerService(session_factory, money=money, clock=clock)


@pytest.fixture
def audit_service(session_factory):
    return AuditService(session_factory)


@pytest.fixture
def payment_service(session_factory, money, clock, audit_service):
    return PaymentService(session_factory, money=money, clock=clock, audit=audit_service)


@pytest.fixture
def owner(owner_service):
    """A registered owner."""
    return owner_service.create(OwnerCreate(name="Ana Silva", email="ana@example.com"))
