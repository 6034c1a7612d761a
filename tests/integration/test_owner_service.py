"""Integration tests for the owner registry."""

import pytest

from condoledger.schemas.ledger import OwnerCreate
from condoledger.schemas.payment import PaymentCreate
from condoledger.services.errors import ConflictError, NotFoundError


class TestOwnerService:
    """Test owner registration and removal."""

    def test_create_and_get(self, owner_service):
        created = owner_service.create(OwnerCreate(name="  Helena Costa ", phone="+244 900"))

        fetched = owner_service.get(created.id)

        assert fetched.name == "Helena Costa"
        assert fetched.phone == "+244 900"
        assert fetched.created_at.tzinfo is not None

    def test_list_sorted_by_name(self, owner_service):
        for name in ["Zeca", "Alda", "Mário"]:
            owner_service.create(OwnerCreate(name=name))

        assert [o.name for o in owner_service.list()] == ["Alda", "Mário", "Zeca"]

    def test_get_missing(self, owner_service):
        with pytest.raises(NotFoundError):
            owner_service.get(1)

    def test_delete_unreferenced(self, owner_service, owner):
        owner_service.delete(owner.id)
        with pytest.raises(NotFoundError):
            owner_service.get(owner.id)

    def test_delete_with_account_conflicts(self, owner_service, ledger_service, owner):
        ledger_service.open(owner.id)
        with pytest.raises(ConflictError):
            owner_service.delete(owner.id)

    def test_delete_with_payments_conflicts(self, owner_service, payment_service, owner):
        payment_service.create(PaymentCreate(amount=1, owner_id=owner.id))
        with pytest.raises(ConflictError):
            owner_service.delete(owner.id)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            OwnerCreate(name="")
