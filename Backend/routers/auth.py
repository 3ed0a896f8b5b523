from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from dependencies import ROLE_ADMIN, ROLE_PHARMACY_OWNER, Principal, create_access_token, require_admin
from models.admin import Admin
from models.pharmacy import AccountStatus, Pharmacy, PharmacyOwner
from schemas.auth import AdminOut, AdminRegisterRequest, LoginRequest, TokenResponse
from schemas.common import MessageResponse
from schemas.pharmacy import OwnerLoginResponse, PharmacyOut, PharmacyOwnerOut
from services.security import hash_password, verify_password

router = APIRouter(tags=["Authentication"])


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


# ─── Admin ────────────────────────────────────────────────
@router.post("/admin/auth/register", response_model=AdminOut, status_code=201)
def admin_register(req: AdminRegisterRequest, db: Session = Depends(get_db)):
    email = _normalize_email(req.email)
    if db.query(Admin).filter(Admin.email == email).first():
        raise HTTPException(status_code=409, detail="Admin with this email already exists")
    admin = Admin(name=req.name, email=email, password_hash=hash_password(req.password))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@router.post("/admin/auth/login", response_model=TokenResponse)
def admin_login(req: LoginRequest, db: Session = Depends(get_db)):
    admin = db.query(Admin).filter(Admin.email == _normalize_email(req.email)).first()
    if not admin or not verify_password(req.password, admin.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token({"sub": admin.id, "email": admin.email, "role": ROLE_ADMIN})
    return TokenResponse(access_token=token, role=ROLE_ADMIN, id=admin.id, name=admin.name, email=admin.email)


@router.post("/admin/auth/logout", response_model=MessageResponse)
def admin_logout(_: Principal = Depends(require_admin)):
    # Tokens are stateless; the client drops its copy.
    return MessageResponse(message="Logged out successfully")


# ─── Pharmacy owner ───────────────────────────────────────
@router.post("/pharmacy-owner/login", response_model=OwnerLoginResponse)
def pharmacy_owner_login(req: LoginRequest, db: Session = Depends(get_db)):
    owner = db.query(PharmacyOwner).filter(PharmacyOwner.email == _normalize_email(req.email)).first()
    if not owner or not verify_password(req.password, owner.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if owner.status != AccountStatus.active:
        raise HTTPException(status_code=401, detail="Your account is inactive. Please contact admin.")

    pharmacy = db.get(Pharmacy, owner.pharmacy_id) if owner.pharmacy_id else None
    token = create_access_token({"sub": owner.id, "email": owner.email, "role": ROLE_PHARMACY_OWNER})
    return OwnerLoginResponse(
        access_token=token,
        owner=PharmacyOwnerOut.model_validate(owner),
        pharmacy=PharmacyOut.model_validate(pharmacy) if pharmacy else None,
    )
