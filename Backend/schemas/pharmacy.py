from datetime import datetime

from pydantic import BaseModel, Field

from models.pharmacy import AccountStatus
from schemas.common import Location


class WorkingHours(BaseModel):
    day: str
    is_open: bool
    open_time: str | None = None   # HH:MM
    close_time: str | None = None


class PharmacyCreate(BaseModel):
    title: str = Field(min_length=2, max_length=150)
    description: str = ""
    image_url: str | None = None
    location: Location
    working_hours: list[WorkingHours] = Field(default_factory=list)
    status: AccountStatus = AccountStatus.active
    owner_name: str = Field(min_length=2, max_length=100)
    owner_email: str = Field(min_length=3, max_length=150)
    owner_password: str = Field(min_length=6)


class PharmacyUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=2, max_length=150)
    description: str | None = None
    image_url: str | None = None
    location: Location | None = None
    working_hours: list[WorkingHours] | None = None
    status: AccountStatus | None = None
    owner_name: str | None = Field(default=None, min_length=2, max_length=100)
    owner_email: str | None = Field(default=None, min_length=3, max_length=150)
    owner_password: str | None = Field(default=None, min_length=6)


class PharmacyOwnerOut(BaseModel):
    id: str
    name: str
    email: str
    pharmacy_id: str | None
    role: str
    status: AccountStatus
    created_at: datetime | None

    class Config:
        from_attributes = True


class PharmacyOut(BaseModel):
    id: str
    title: str
    description: str
    image_url: str | None
    location: Location
    owner_id: str | None
    working_hours: list[WorkingHours]
    status: AccountStatus
    created_by: str | None = None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class PharmacyWithOwnerOut(PharmacyOut):
    owner: PharmacyOwnerOut | None = None


class ImageUploadResponse(BaseModel):
    image_url: str


class OwnerLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    owner: PharmacyOwnerOut
    pharmacy: PharmacyOut | None = None
