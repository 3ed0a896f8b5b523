from sqlalchemy import Column, String, Text, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
import enum

from database import Base, generate_id


class AvailabilityStatus(str, enum.Enum):
    available = "available"
    unavailable = "unavailable"


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    front_image_url = Column(String(500), nullable=False)
    back_image_url = Column(String(500), nullable=False)
    status = Column(SAEnum(AvailabilityStatus), default=AvailabilityStatus.available, nullable=False)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
