"""Composition root for wiring the ledger services."""

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from condoledger.services.audit_service import AuditService
from condoledger.services.classifier import ClassifierPolicy
from condoledger.services.clock import Clock, SystemClock
from condoledger.services.config import Settings, get_settings
from condoledger.services.db import create_engine_from_settings, create_session_factory
from condoledger.services.ledger_service import LedgerService
from condoledger.services.locale_service import MoneyFormat
from condoledger.services.logging import setup_logging
from condoledger.services.owner_service import OwnerService
from condoledger.services.payment_service import PaymentService


@dataclass
class LedgerContainer:
    """Services sharing one engine, clock and money format."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    clock: Clock
    money: MoneyFormat
    policy: ClassifierPolicy
    owners: OwnerService
    ledger: LedgerService
    payments: PaymentService
    audit: AuditService

    def dispose(self) -> None:
        """Release pooled database connections."""
        self.engine.dispose()


def build_policy(settings: Settings) -> ClassifierPolicy:
    """Return the overdue classification policy for the settings."""
    return ClassifierPolicy(
        mild_max_days=settings.mild_overdue_days,
        moderate_max_days=settings.moderate_overdue_days,
    )


def build_container(
    settings: Settings | None = None,
    clock: Clock | None = None,
    engine: Engine | None = None,
    configure_logging: bool = False,
) -> LedgerContainer:
    """Return a container wired from settings (default: environment).

    With ``configure_logging`` the root logger is set up from the
    ``log_file`` and ``log_level`` settings; embedding processes that own
    their logging leave it off.
    """
    resolved_settings = settings or get_settings()
    if configure_logging:
        setup_logging(resolved_settings.log_file, resolved_settings.log_level)
    resolved_engine = engine or create_engine_from_settings(resolved_settings)
    session_factory = create_session_factory(resolved_engine)
    resolved_clock = clock or SystemClock()
    money = MoneyFormat.from_settings(resolved_settings)
    policy = build_policy(resolved_settings)
    audit = AuditService(session_factory)

    return LedgerContainer(
        settings=resolved_settings,
        engine=resolved_engine,
        session_factory=session_factory,
        clock=resolved_clock,
        money=money,
        policy=policy,
        owners=OwnerService(session_factory),
        ledger=LedgerService(session_factory, money=money, clock=resolved_clock),
        payments=PaymentService(
            session_factory,
            money=money,
            clock=resolved_clock,
            policy=policy,
            audit=audit,
            default_page_size=resolved_settings.default_page_size,
        ),
        audit=audit,
    )


__all__ = ["LedgerContainer", "build_container", "build_policy"]
