from datetime import datetime

from pydantic import BaseModel

from models.medicine import AvailabilityStatus
from schemas.medicine import MedicineOut


class InventoryAdd(BaseModel):
    medicine_id: str
    status: AvailabilityStatus | None = None


class InventoryStatusUpdate(BaseModel):
    status: AvailabilityStatus


class PharmacyMedicineOut(BaseModel):
    id: str
    pharmacy_id: str
    medicine_id: str
    status: AvailabilityStatus
    added_by: str
    added_at: datetime | None
    updated_at: datetime | None
    medicine: MedicineOut | None = None

    class Config:
        from_attributes = True
