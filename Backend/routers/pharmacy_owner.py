from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from dependencies import Principal, get_availability_notifier, require_pharmacy_owner
from schemas.common import MessageResponse
from schemas.inventory import InventoryAdd, InventoryStatusUpdate, PharmacyMedicineOut
from schemas.medicine import MedicineOut
from services import inventory

router = APIRouter(prefix="/pharmacy-owner", tags=["PharmacyOwner"])


@router.get("/medicines/all", response_model=list[MedicineOut])
def list_catalog_medicines(
    _: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
):
    """Whole admin catalog, for picking what to stock."""
    return inventory.list_catalog(db)


@router.get("/pharmacy/{pharmacy_id}/medicines/available", response_model=list[MedicineOut])
def list_addable_medicines(
    pharmacy_id: str,
    principal: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
):
    """Catalog medicines this pharmacy has not stocked yet."""
    return inventory.list_addable_for_pharmacy(db, pharmacy_id, principal.id)


@router.get("/pharmacy/{pharmacy_id}/medicines", response_model=list[PharmacyMedicineOut])
def list_pharmacy_medicines(
    pharmacy_id: str,
    principal: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
):
    return inventory.list_for_pharmacy(db, pharmacy_id, principal.id)


@router.post("/pharmacy/{pharmacy_id}/medicines", response_model=PharmacyMedicineOut, status_code=201)
def add_pharmacy_medicine(
    pharmacy_id: str,
    data: InventoryAdd,
    principal: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
    notifier=Depends(get_availability_notifier),
):
    return inventory.add_medicine(db, pharmacy_id, principal.id, data.medicine_id, data.status, notifier=notifier)


@router.patch("/pharmacy/{pharmacy_id}/medicines/{row_id}", response_model=PharmacyMedicineOut)
def update_pharmacy_medicine(
    pharmacy_id: str,
    row_id: str,
    data: InventoryStatusUpdate,
    principal: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
    notifier=Depends(get_availability_notifier),
):
    return inventory.update_status(db, row_id, pharmacy_id, principal.id, data.status, notifier=notifier)


@router.delete("/pharmacy/{pharmacy_id}/medicines/{row_id}", response_model=MessageResponse)
def remove_pharmacy_medicine(
    pharmacy_id: str,
    row_id: str,
    principal: Principal = Depends(require_pharmacy_owner),
    db: Session = Depends(get_db),
):
    inventory.remove_medicine(db, row_id, pharmacy_id, principal.id)
    return MessageResponse(message="Medicine removed from pharmacy successfully")
