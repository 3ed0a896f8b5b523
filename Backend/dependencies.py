from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, FIREBASE_STORAGE_BUCKET, SECRET_KEY
from database import SessionLocal, get_db
from models.admin import Admin
from models.pharmacy import AccountStatus, PharmacyOwner
from models.user import User, UserStatus
from services.notifications import AvailabilityNotifier
from services.storage import FirebaseImageStorage

ROLE_ADMIN = "admin"
ROLE_PHARMACY_OWNER = "pharmacy-owner"
ROLE_USER = "user"

_ROLE_MODELS = {
    ROLE_ADMIN: Admin,
    ROLE_PHARMACY_OWNER: PharmacyOwner,
    ROLE_USER: User,
}

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Principal:
    id: str
    role: str
    account: Admin | PharmacyOwner | User


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized
    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise unauthorized
    subject = payload.get("sub")
    role = payload.get("role")
    model = _ROLE_MODELS.get(role)
    if not subject or model is None:
        raise unauthorized

    account = db.get(model, subject)
    if not account:
        raise unauthorized
    if role == ROLE_USER and account.status == UserStatus.banned:
        raise HTTPException(status_code=403, detail="Account is banned")
    if role == ROLE_PHARMACY_OWNER and account.status != AccountStatus.active:
        raise HTTPException(status_code=403, detail="Account is inactive")
    return Principal(id=account.id, role=role, account=account)


def _require(role: str):
    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != role:
            raise HTTPException(status_code=403, detail="Access denied")
        return principal

    return checker


require_admin = _require(ROLE_ADMIN)
require_pharmacy_owner = _require(ROLE_PHARMACY_OWNER)
require_user = _require(ROLE_USER)


@lru_cache
def get_storage() -> FirebaseImageStorage:
    return FirebaseImageStorage(bucket_name=FIREBASE_STORAGE_BUCKET)


@lru_cache
def get_availability_notifier() -> AvailabilityNotifier:
    return AvailabilityNotifier(SessionLocal)
