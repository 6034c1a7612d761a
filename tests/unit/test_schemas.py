"""Unit tests for request and response schemas."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from condoledger.models.payment import PaymentState
from condoledger.schemas.ledger import BalanceCheck
from condoledger.schemas.payment import Pagination, PaymentCreate, PaymentFilter, PaymentUpdate


class TestPaymentCreate:
    """Test payment creation input."""

    def test_state_defaults_to_pending(self):
        fields = PaymentCreate(amount="15.000,00")
        assert fields.state is PaymentState.PENDING

    def test_explicit_none_state_is_pending(self):
        fields = PaymentCreate(amount=100, state=None)
        assert fields.state is PaymentState.PENDING

    def test_state_aliases(self):
        """Test states are parsed case-insensitively."""
        assert PaymentCreate(amount=1, state="pago").state is PaymentState.PAID

    def test_unknown_state_rejected(self):
        with pytest.raises(ValidationError):
            PaymentCreate(amount=1, state="REFUNDED")

    def test_naive_due_date_becomes_utc(self):
        fields = PaymentCreate(amount=1, due_at=datetime(2025, 7, 1, 9, 0))
        assert fields.due_at == datetime(2025, 7, 1, 9, 0, tzinfo=timezone.utc)


class TestPaymentUpdate:
    """Test partial update semantics."""

    def test_absent_fields_are_not_provided(self):
        """Test only explicitly set fields are reported."""
        update = PaymentUpdate(state="PAID")
        assert update.provided() == {"state": PaymentState.PAID}

    def test_explicit_none_is_provided(self):
        """Test an explicit None is distinguishable from absence."""
        update = PaymentUpdate(description=None)
        assert update.provided() == {"description": None}

    def test_empty_update(self):
        assert PaymentUpdate().provided() == {}


class TestListingInputs:
    """Test filter and pagination defaults."""

    def test_filter_defaults_to_active(self):
        assert PaymentFilter().active is True

    def test_filter_state_alias(self):
        assert PaymentFilter(state="pendente").state is PaymentState.PENDING

    def test_pagination_offset(self):
        assert Pagination(page=3, page_size=20).offset == 40

    @pytest.mark.parametrize("page,page_size", [(0, 20), (1, 0), (1, 501)])
    def test_pagination_bounds(self, page, page_size):
        with pytest.raises(ValidationError):
            Pagination(page=page, page_size=page_size)


def test_balance_check_consistency():
    """Test consistency compares cached balance with postings total."""
    check = BalanceCheck(account_id=1, current_balance="70.00", postings_total="70", posting_count=2)
    assert check.consistent
    drift = BalanceCheck(account_id=1, current_balance="71.00", postings_total="70", posting_count=2)
    assert not drift.consistent
