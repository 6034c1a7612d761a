"""Wiring of services from settings."""

import logging
from datetime import timedelta
from decimal import Decimal

from condoledger.container import build_container
from condoledger.schemas.ledger import OwnerCreate
from condoledger.schemas.payment import PaymentCreate
from condoledger.services.config import Settings
from condoledger.services.db import init_db


def test_container_shares_settings(clock):
    """Test services follow the configured money format and policy."""
    settings = Settings(
        database_url="sqlite://",
        _env_file=None,
        currency_code="EUR",
        mild_overdue_days=5,
        moderate_overdue_days=10,
        default_page_size=2,
    )
    container = build_container(settings, clock=clock)
    init_db(container.engine)
    try:
        owner = container.owners.create(OwnerCreate(name="Inês"))
        account = container.ledger.open(owner.id, "12.345,60")
        assert account.current_balance_display == "12.345,60 EUR"

        for _ in range(3):
            container.payments.create(
                PaymentCreate(amount=Decimal("10"), due_at=clock.now() - timedelta(days=6))
            )
        page = container.payments.list()

        assert page.page_size == 2
        assert page.total_pages == 2
        assert page.items[0].status_label == "Moderately overdue (6 days)"
        assert container.payments.audit is container.audit
    finally:
        container.dispose()


def test_container_applies_logging_settings(tmp_path, clock):
    """Test the log file and level settings configure the root logger."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level
    log_file = tmp_path / "logs" / "ledger.log"
    settings = Settings(
        database_url="sqlite://",
        _env_file=None,
        log_file=str(log_file),
        log_level="warning",
    )

    container = build_container(settings, clock=clock, configure_logging=True)
    try:
        assert root_logger.level == logging.WARNING
        file_handlers = [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]
        assert [h.baseFilename for h in file_handlers] == [str(log_file)]

        logging.getLogger("condoledger.test").warning("Ledger ready")
        for handler in root_logger.handlers:
            handler.flush()
        assert "Ledger ready" in log_file.read_text()
    finally:
        container.dispose()
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        for handler in original_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(original_level)


def test_container_leaves_logging_alone_by_default(clock):
    root_logger = logging.getLogger()
    handlers = root_logger.handlers.copy()

    container = build_container(Settings(database_url="sqlite://", _env_file=None), clock=clock)
    container.dispose()

    assert root_logger.handlers == handlers
