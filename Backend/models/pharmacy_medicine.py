from sqlalchemy import Column, String, DateTime, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base, generate_id
from models.medicine import AvailabilityStatus, Medicine


class PharmacyMedicine(Base):
    """Inventory row linking a pharmacy to a catalog medicine.

    ``medicine_id`` carries no foreign key: a catalog entry may be deleted
    while inventory rows still point at it, in which case ``medicine`` is None.
    """

    __tablename__ = "pharmacy_medicines"
    __table_args__ = (UniqueConstraint("pharmacy_id", "medicine_id", name="uq_pharmacy_medicine_pair"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    pharmacy_id = Column(String(36), nullable=False, index=True)
    medicine_id = Column(String(36), nullable=False)
    status = Column(SAEnum(AvailabilityStatus), default=AvailabilityStatus.available, nullable=False)
    added_by = Column(String(36), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    medicine = relationship(
        Medicine,
        primaryjoin="foreign(PharmacyMedicine.medicine_id) == Medicine.id",
        viewonly=True,
        lazy="joined",
    )
