from sqlalchemy import Column, String, Text, DateTime, JSON, Enum as SAEnum
from sqlalchemy.sql import func
import enum

from database import Base, generate_id


class AccountStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


PHARMACY_OWNER_ROLE = "pharmacy-owner"


class Pharmacy(Base):
    __tablename__ = "pharmacies"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)
    location = Column(JSON, nullable=False)       # {latitude, longitude, address?}
    owner_id = Column(String(36), nullable=True, index=True)
    working_hours = Column(JSON, nullable=False, default=list)
    status = Column(SAEnum(AccountStatus), default=AccountStatus.active, nullable=False)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PharmacyOwner(Base):
    __tablename__ = "pharmacy_owners"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    pharmacy_id = Column(String(36), nullable=True, index=True)
    role = Column(String(30), nullable=False, default=PHARMACY_OWNER_ROLE)
    status = Column(SAEnum(AccountStatus), default=AccountStatus.active, nullable=False)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
