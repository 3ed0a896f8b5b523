from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import ROLE_ADMIN, ROLE_PHARMACY_OWNER, Principal, get_current_principal
from schemas.notification import MedicineSubscriptionOut
from services.notifications import list_pending
from services.ownership import verify_ownership

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/pharmacy/{pharmacy_id}", response_model=list[MedicineSubscriptionOut])
def pending_notifications(
    pharmacy_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Subscriptions for this pharmacy that have not been delivered yet."""
    if principal.role == ROLE_PHARMACY_OWNER:
        verify_ownership(db, pharmacy_id, principal.id)
    elif principal.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admin or pharmacy owner access required")
    return list_pending(db, pharmacy_id)
