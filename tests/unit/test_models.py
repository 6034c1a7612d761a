"""Unit tests for model enums and helpers."""

from decimal import Decimal

import pytest

from condoledger.models import Payment, PaymentState, Posting, PostingKind


class TestPostingKind:
    """Test posting kind parsing and signs."""

    @pytest.mark.parametrize("raw", ["CREDIT", "credit", " Credito ", "CRÉDITO"])
    def test_parse_credit_aliases(self, raw):
        assert PostingKind.parse(raw) is PostingKind.CREDIT

    @pytest.mark.parametrize("raw", ["DEBIT", "debit", "DEBITO", "débito"])
    def test_parse_debit_aliases(self, raw):
        assert PostingKind.parse(raw) is PostingKind.DEBIT

    def test_parse_unknown(self):
        """Test an unknown kind raises ValueError."""
        with pytest.raises(ValueError, match="Unknown posting kind"):
            PostingKind.parse("TRANSFER")

    def test_sign(self):
        """Test credits add and debits subtract."""
        assert PostingKind.CREDIT.sign(Decimal("10")) == Decimal("10")
        assert PostingKind.DEBIT.sign(Decimal("10")) == Decimal("-10")

    def test_signed_amount(self):
        posting = Posting(kind=PostingKind.DEBIT, amount=Decimal("250.00"))
        assert posting.signed_amount == Decimal("-250.00")


class TestPaymentState:
    """Test payment state parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("pending", PaymentState.PENDING),
            ("PENDENTE", PaymentState.PENDING),
            ("Pago", PaymentState.PAID),
            ("canceled", PaymentState.CANCELLED),
            (PaymentState.PAID, PaymentState.PAID),
        ],
    )
    def test_parse(self, raw, expected):
        assert PaymentState.parse(raw) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown payment state"):
            PaymentState.parse("REFUNDED")

    def test_repr(self):
        payment = Payment(id=3, amount=Decimal("10"), state=PaymentState.PAID, active=True)
        assert "id=3" in repr(payment)
