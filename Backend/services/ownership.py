from sqlalchemy.orm import Session

from models.pharmacy import Pharmacy
from services.errors import ForbiddenError, NotFoundError


def verify_ownership(db: Session, pharmacy_id: str, owner_id: str) -> Pharmacy:
    """Guard for owner-scoped mutations. Returns the pharmacy on success."""
    pharmacy = db.get(Pharmacy, pharmacy_id)
    if not pharmacy:
        raise NotFoundError("Pharmacy not found")
    if pharmacy.owner_id != owner_id:
        raise ForbiddenError("You do not have access to this pharmacy")
    return pharmacy
