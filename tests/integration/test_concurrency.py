"""Concurrent postings against one account on a file-backed database."""

import threading
from decimal import Decimal

import pytest

from condoledger.schemas.ledger import OwnerCreate
from condoledger.services.config import Settings
from condoledger.services.db import create_engine_from_settings, create_session_factory, init_db
from condoledger.services.ledger_service import LedgerService
from condoledger.services.owner_service import OwnerService


@pytest.fixture
def file_ledger(tmp_path):
    """Ledger service backed by a SQLite file shared across threads."""
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'ledger.db'}", _env_file=None)
    engine = create_engine_from_settings(settings)
    init_db(engine)
    session_factory = create_session_factory(engine)
    yield OwnerService(session_factory), LedgerService(session_factory)
    engine.dispose()


def _run_concurrently(jobs):
    barrier = threading.Barrier(len(jobs))
    errors = []

    def worker(job):
        barrier.wait()
        try:
            job()
        except Exception as e:  # surfaced by the assertion below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(job,)) for job in jobs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return errors


class TestConcurrentPostings:
    """Concurrent postings must not lose balance updates."""

    def test_credit_and_debit_race(self, file_ledger):
        owners, ledger = file_ledger
        owner = owners.create(OwnerCreate(name="Eva"))
        account = ledger.open(owner.id)

        errors = _run_concurrently(
            [
                lambda: ledger.post(account.id, "CREDIT", 100),
                lambda: ledger.post(account.id, "DEBIT", 30),
            ]
        )

        assert errors == []
        assert ledger.get(account.id).current_balance == Decimal("70.00")

    def test_many_writers(self, file_ledger):
        owners, ledger = file_ledger
        owner = owners.create(OwnerCreate(name="Fausto"))
        account = ledger.open(owner.id, 1000)

        jobs = [lambda: ledger.post(account.id, "CREDIT", 100) for _ in range(4)]
        jobs += [lambda: ledger.post(account.id, "DEBIT", "30,00") for _ in range(4)]
        errors = _run_concurrently(jobs)

        assert errors == []
        check = ledger.reconcile(account.id)
        assert check.current_balance == Decimal("1280.00")
        assert check.posting_count == 9
        assert check.consistent
