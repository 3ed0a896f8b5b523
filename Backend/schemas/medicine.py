from pydantic import BaseModel
from datetime import datetime

from models.medicine import AvailabilityStatus


class MedicineOut(BaseModel):
    id: str
    title: str
    description: str
    front_image_url: str
    back_image_url: str
    status: AvailabilityStatus
    created_by: str | None = None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True
