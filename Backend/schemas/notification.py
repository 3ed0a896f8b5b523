from pydantic import BaseModel
from datetime import datetime


class MedicineSubscriptionOut(BaseModel):
    id: str
    user_id: str
    pharmacy_id: str
    medicine_name: str
    pharmacy_name: str
    notified: bool
    triggered: bool
    triggered_at: datetime | None = None
    created_at: datetime | None

    class Config:
        from_attributes = True
