"""
Per-pharmacy medicine inventory.

Every operation is owner-scoped and starts with ``verify_ownership``. Adding
a row as available, or moving an existing row from unavailable to available,
hands the medicine name to the availability notifier after the write has
committed. The notifier runs detached: whatever happens there never changes
the result returned here.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.medicine import AvailabilityStatus, Medicine
from models.pharmacy_medicine import PharmacyMedicine
from services.errors import ConflictError, ForbiddenError, NotFoundError
from services.ownership import verify_ownership

logger = logging.getLogger(__name__)


def _notify_available(notifier, pharmacy_id: str, medicine: Medicine | None, pharmacy_name: str) -> None:
    if notifier is None or medicine is None or not medicine.title:
        return
    try:
        notifier.schedule(pharmacy_id, medicine.title, pharmacy_name)
    except Exception:
        logger.exception("Could not schedule availability check for %r at %s", medicine.title, pharmacy_id)


def _load_row(db: Session, row_id: str, pharmacy_id: str, action: str) -> PharmacyMedicine:
    row = db.get(PharmacyMedicine, row_id)
    if not row:
        raise NotFoundError("Medicine record not found")
    if row.pharmacy_id != pharmacy_id:
        raise ForbiddenError(f"You do not have permission to {action} this medicine")
    return row


def add_medicine(
    db: Session,
    pharmacy_id: str,
    owner_id: str,
    medicine_id: str,
    status: AvailabilityStatus | None = None,
    notifier=None,
) -> PharmacyMedicine:
    pharmacy = verify_ownership(db, pharmacy_id, owner_id)

    medicine = db.get(Medicine, medicine_id)
    if not medicine:
        raise NotFoundError("Medicine not found")

    existing = (
        db.query(PharmacyMedicine)
        .filter(PharmacyMedicine.pharmacy_id == pharmacy_id, PharmacyMedicine.medicine_id == medicine_id)
        .first()
    )
    if existing:
        raise ConflictError("Medicine already added to this pharmacy")

    row = PharmacyMedicine(
        pharmacy_id=pharmacy_id,
        medicine_id=medicine_id,
        status=status or AvailabilityStatus.available,
        added_by=owner_id,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Medicine already added to this pharmacy")
    db.refresh(row)

    if row.status == AvailabilityStatus.available:
        _notify_available(notifier, pharmacy_id, medicine, pharmacy.title)
    return row


def update_status(
    db: Session,
    row_id: str,
    pharmacy_id: str,
    owner_id: str,
    new_status: AvailabilityStatus,
    notifier=None,
) -> PharmacyMedicine:
    pharmacy = verify_ownership(db, pharmacy_id, owner_id)
    row = _load_row(db, row_id, pharmacy_id, "update")

    previous = row.status
    row.status = new_status
    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)

    # Only the transition into available triggers; repeated writes do not.
    if new_status == AvailabilityStatus.available and previous != AvailabilityStatus.available:
        _notify_available(notifier, pharmacy_id, row.medicine, pharmacy.title)
    return row


def remove_medicine(db: Session, row_id: str, pharmacy_id: str, owner_id: str) -> None:
    verify_ownership(db, pharmacy_id, owner_id)
    row = _load_row(db, row_id, pharmacy_id, "remove")
    db.delete(row)
    db.commit()


def list_for_pharmacy(db: Session, pharmacy_id: str, owner_id: str) -> list[PharmacyMedicine]:
    verify_ownership(db, pharmacy_id, owner_id)
    return (
        db.query(PharmacyMedicine)
        .filter(PharmacyMedicine.pharmacy_id == pharmacy_id)
        .order_by(PharmacyMedicine.added_at.desc())
        .all()
    )


def list_addable_for_pharmacy(db: Session, pharmacy_id: str, owner_id: str) -> list[Medicine]:
    verify_ownership(db, pharmacy_id, owner_id)
    added_ids = {
        medicine_id
        for (medicine_id,) in db.query(PharmacyMedicine.medicine_id)
        .filter(PharmacyMedicine.pharmacy_id == pharmacy_id)
        .all()
    }
    return [m for m in list_catalog(db) if m.id not in added_ids]


def list_catalog(db: Session) -> list[Medicine]:
    return db.query(Medicine).order_by(Medicine.created_at.desc()).all()
