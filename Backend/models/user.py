from sqlalchemy import Column, String, Boolean, DateTime, JSON, Enum as SAEnum
from sqlalchemy.sql import func
import enum

from database import Base, generate_id


class UserStatus(str, enum.Enum):
    active = "active"
    banned = "banned"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    location = Column(JSON, nullable=True)        # {latitude, longitude, address?}
    status = Column(SAEnum(UserStatus), default=UserStatus.active, nullable=False)
    # None means the user never chose; only an explicit False opts out.
    notifications_enabled = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
