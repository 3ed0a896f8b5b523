import pytest

from services.errors import ForbiddenError, NotFoundError
from services.ownership import verify_ownership


class TestVerifyOwnership:
    def test_owner_gets_pharmacy_back(self, db, make_pharmacy):
        pharmacy, owner = make_pharmacy("Central")
        assert verify_ownership(db, pharmacy.id, owner.id).title == "Central"

    def test_other_owner_is_forbidden(self, db, make_pharmacy):
        pharmacy, _ = make_pharmacy()
        _, other_owner = make_pharmacy()
        with pytest.raises(ForbiddenError):
            verify_ownership(db, pharmacy.id, other_owner.id)

    def test_unknown_pharmacy_is_not_found(self, db, make_pharmacy):
        _, owner = make_pharmacy()
        with pytest.raises(NotFoundError):
            verify_ownership(db, "missing", owner.id)
