from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from dependencies import Principal, require_admin
from models.medicine import AvailabilityStatus, Medicine
from models.pharmacy import AccountStatus, Pharmacy, PharmacyOwner
from models.user import User, UserStatus
from schemas.dashboard import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _count(db: Session, model, *criteria) -> int:
    return db.query(func.count(model.id)).filter(*criteria).scalar() or 0


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    return DashboardStats(
        total_users=_count(db, User),
        banned_users=_count(db, User, User.status == UserStatus.banned),
        new_users_this_month=_count(db, User, User.created_at >= month_start),
        total_pharmacies=_count(db, Pharmacy),
        active_pharmacies=_count(db, Pharmacy, Pharmacy.status == AccountStatus.active),
        inactive_pharmacies=_count(db, Pharmacy, Pharmacy.status == AccountStatus.inactive),
        new_pharmacies_this_month=_count(db, Pharmacy, Pharmacy.created_at >= month_start),
        total_pharmacy_owners=_count(db, PharmacyOwner),
        total_medicines=_count(db, Medicine),
        available_medicines=_count(db, Medicine, Medicine.status == AvailabilityStatus.available),
        unavailable_medicines=_count(db, Medicine, Medicine.status == AvailabilityStatus.unavailable),
    )
