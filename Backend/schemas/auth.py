from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str
    password: str


class AdminRegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(min_length=3, max_length=150)
    password: str = Field(min_length=6)


class AdminOut(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    id: str
    name: str | None = None
    email: str | None = None
