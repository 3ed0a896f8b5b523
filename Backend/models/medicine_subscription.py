from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from database import Base, generate_id


class MedicineSubscription(Base):
    __tablename__ = "medicine_subscriptions"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), nullable=False, index=True)
    pharmacy_id = Column(String(36), nullable=False, index=True)
    medicine_name = Column(String(200), nullable=False)
    pharmacy_name = Column(String(150), nullable=False, default="")
    notified = Column(Boolean, default=False, nullable=False)   # set by the delivery side
    triggered = Column(Boolean, default=False, nullable=False)  # only ever false -> true
    triggered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
