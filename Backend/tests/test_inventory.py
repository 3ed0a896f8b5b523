import pytest

from models.medicine import AvailabilityStatus
from models.pharmacy_medicine import PharmacyMedicine
from services import inventory
from services.errors import ConflictError, ForbiddenError, NotFoundError


class BrokenNotifier:
    def __init__(self):
        self.calls = 0

    def schedule(self, pharmacy_id, medicine_name, pharmacy_name=""):
        self.calls += 1
        raise RuntimeError("notifier is down")


@pytest.fixture
def stocked(db, make_pharmacy, make_medicine):
    pharmacy, owner = make_pharmacy("Central")
    medicine = make_medicine("Amoxicillin")
    return pharmacy, owner, medicine


class TestAddMedicine:
    def test_defaults_to_available_and_schedules_check(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, notifier=notifier)

        assert row.status == AvailabilityStatus.available
        assert row.added_by == owner.id
        assert row.medicine.title == "Amoxicillin"
        assert notifier.calls == [(pharmacy.id, "Amoxicillin", "Central")]

    def test_unavailable_add_does_not_schedule(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, AvailabilityStatus.unavailable, notifier=notifier)
        assert notifier.calls == []

    def test_duplicate_pair_conflicts(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, notifier=notifier)
        with pytest.raises(ConflictError):
            inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, notifier=notifier)
        assert db.query(PharmacyMedicine).count() == 1

    def test_unknown_medicine(self, db, stocked):
        pharmacy, owner, _ = stocked
        with pytest.raises(NotFoundError):
            inventory.add_medicine(db, pharmacy.id, owner.id, "missing")

    def test_notifier_failure_does_not_fail_add(self, db, stocked):
        pharmacy, owner, medicine = stocked
        broken = BrokenNotifier()
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, notifier=broken)
        assert row.id
        assert broken.calls == 1


class TestOwnershipIsolation:
    def test_every_operation_rejects_foreign_owner(self, db, stocked, make_pharmacy, notifier):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, notifier=notifier)
        _, intruder = make_pharmacy()

        with pytest.raises(ForbiddenError):
            inventory.add_medicine(db, pharmacy.id, intruder.id, medicine.id)
        with pytest.raises(ForbiddenError):
            inventory.update_status(db, row.id, pharmacy.id, intruder.id, AvailabilityStatus.unavailable)
        with pytest.raises(ForbiddenError):
            inventory.remove_medicine(db, row.id, pharmacy.id, intruder.id)
        with pytest.raises(ForbiddenError):
            inventory.list_for_pharmacy(db, pharmacy.id, intruder.id)
        with pytest.raises(ForbiddenError):
            inventory.list_addable_for_pharmacy(db, pharmacy.id, intruder.id)

    def test_every_operation_rejects_unknown_pharmacy(self, db, stocked):
        _, owner, medicine = stocked
        with pytest.raises(NotFoundError):
            inventory.add_medicine(db, "nope", owner.id, medicine.id)
        with pytest.raises(NotFoundError):
            inventory.update_status(db, "row", "nope", owner.id, AvailabilityStatus.available)
        with pytest.raises(NotFoundError):
            inventory.remove_medicine(db, "row", "nope", owner.id)
        with pytest.raises(NotFoundError):
            inventory.list_for_pharmacy(db, "nope", owner.id)
        with pytest.raises(NotFoundError):
            inventory.list_addable_for_pharmacy(db, "nope", owner.id)

    def test_row_from_another_pharmacy_is_forbidden(self, db, stocked, make_pharmacy):
        pharmacy, owner, medicine = stocked
        other_pharmacy, other_owner = make_pharmacy()
        foreign_row = inventory.add_medicine(db, other_pharmacy.id, other_owner.id, medicine.id)

        with pytest.raises(ForbiddenError):
            inventory.update_status(db, foreign_row.id, pharmacy.id, owner.id, AvailabilityStatus.unavailable)
        with pytest.raises(ForbiddenError):
            inventory.remove_medicine(db, foreign_row.id, pharmacy.id, owner.id)

    def test_unknown_row(self, db, stocked):
        pharmacy, owner, _ = stocked
        with pytest.raises(NotFoundError):
            inventory.update_status(db, "missing", pharmacy.id, owner.id, AvailabilityStatus.available)


class TestUpdateStatus:
    def test_transition_into_available_schedules_once(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, AvailabilityStatus.unavailable, notifier=notifier)

        updated = inventory.update_status(db, row.id, pharmacy.id, owner.id, AvailabilityStatus.available, notifier=notifier)
        assert updated.status == AvailabilityStatus.available
        assert notifier.calls == [(pharmacy.id, "Amoxicillin", "Central")]

        inventory.update_status(db, row.id, pharmacy.id, owner.id, AvailabilityStatus.available, notifier=notifier)
        assert len(notifier.calls) == 1

    def test_going_unavailable_does_not_schedule(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id)
        inventory.update_status(db, row.id, pharmacy.id, owner.id, AvailabilityStatus.unavailable, notifier=notifier)
        assert notifier.calls == []

    def test_deleted_catalog_entry_skips_schedule(self, db, stocked, notifier):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id, AvailabilityStatus.unavailable)
        db.delete(medicine)
        db.commit()

        inventory.update_status(db, row.id, pharmacy.id, owner.id, AvailabilityStatus.available, notifier=notifier)
        assert notifier.calls == []


class TestRemoveAndList:
    def test_remove_deletes_row(self, db, stocked):
        pharmacy, owner, medicine = stocked
        row = inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id)
        inventory.remove_medicine(db, row.id, pharmacy.id, owner.id)
        assert db.get(PharmacyMedicine, row.id) is None

    def test_list_inlines_catalog_medicine(self, db, stocked, make_medicine):
        pharmacy, owner, medicine = stocked
        gone = make_medicine("Discontinued")
        inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id)
        inventory.add_medicine(db, pharmacy.id, owner.id, gone.id)
        db.delete(gone)
        db.commit()
        db.expire_all()

        rows = {r.medicine_id: r for r in inventory.list_for_pharmacy(db, pharmacy.id, owner.id)}
        assert rows[medicine.id].medicine.title == "Amoxicillin"
        assert rows[gone.id].medicine is None

    def test_addable_excludes_stocked_medicines(self, db, stocked, make_medicine):
        pharmacy, owner, medicine = stocked
        other = make_medicine("Cetirizine")
        inventory.add_medicine(db, pharmacy.id, owner.id, medicine.id)

        addable = inventory.list_addable_for_pharmacy(db, pharmacy.id, owner.id)
        assert [m.id for m in addable] == [other.id]
