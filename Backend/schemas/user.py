from pydantic import BaseModel, Field
from datetime import datetime

from models.user import UserStatus
from schemas.common import Location


class UserRegister(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6)
    location: Location | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    email: str | None = Field(default=None, min_length=3, max_length=150)
    location: Location | None = None
    notifications_enabled: bool | None = None


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    location: Location | None = None
    status: UserStatus
    notifications_enabled: bool | None = None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class UserStatistics(BaseModel):
    total_users: int
    active_users: int
    banned_users: int
    users_with_location: int


class UserLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
