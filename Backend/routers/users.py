from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from dependencies import ROLE_USER, Principal, create_access_token, require_admin, require_user
from models.user import User, UserStatus
from schemas.auth import LoginRequest
from schemas.common import MessageResponse
from schemas.user import UserLoginResponse, UserOut, UserRegister, UserStatistics, UserStatusUpdate, UserUpdate
from services.security import hash_password, verify_password

router = APIRouter(prefix="/users", tags=["Users"])


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _apply_update(db: Session, user: User, data: UserUpdate) -> User:
    update_data = data.model_dump(exclude_unset=True)
    if "email" in update_data:
        update_data["email"] = update_data["email"].strip().lower()
        if update_data["email"] != user.email:
            taken = db.query(User).filter(User.email == update_data["email"], User.id != user.id).first()
            if taken:
                raise HTTPException(status_code=409, detail="Email already in use")
    for key, value in update_data.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


@router.post("", response_model=UserOut, status_code=201)
def register_user(data: UserRegister, db: Session = Depends(get_db)):
    email = data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="User with this email already exists")
    user = User(
        name=data.name,
        email=email,
        password_hash=hash_password(data.password),
        location=data.location.model_dump() if data.location else None,
        status=UserStatus.active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/login", response_model=UserLoginResponse)
def login_user(req: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == req.email.strip().lower()).first()
    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if user.status == UserStatus.banned:
        raise HTTPException(status_code=403, detail="Your account has been banned")
    token = create_access_token({"sub": user.id, "email": user.email, "role": ROLE_USER})
    return UserLoginResponse(access_token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def get_profile(principal: Principal = Depends(require_user)):
    """Return current user profile."""
    return principal.account


@router.patch("/me", response_model=UserOut)
def update_profile(
    data: UserUpdate,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Update profile fields, including the availability-alert opt-out."""
    return _apply_update(db, principal.account, data)


@router.get("", response_model=list[UserOut])
def list_users(
    status: UserStatus | None = Query(default=None),
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(User)
    if status:
        q = q.filter(User.status == status)
    return q.order_by(User.created_at.desc()).all()


@router.get("/statistics", response_model=UserStatistics)
def user_statistics(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User.status, User.location).all()
    return UserStatistics(
        total_users=len(users),
        active_users=sum(1 for u in users if u.status == UserStatus.active),
        banned_users=sum(1 for u in users if u.status == UserStatus.banned),
        users_with_location=sum(1 for u in users if u.location),
    )


@router.get("/search", response_model=list[UserOut])
def search_users(
    q: str = Query(min_length=1),
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    pattern = f"%{q.strip()}%"
    return (
        db.query(User)
        .filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        .order_by(User.created_at.desc())
        .all()
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, _: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    data: UserUpdate,
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _apply_update(db, _get_user_or_404(db, user_id), data)


@router.patch("/{user_id}/status", response_model=UserOut)
def update_user_status(
    user_id: str,
    data: UserStatusUpdate,
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Ban or unban a user."""
    user = _get_user_or_404(db, user_id)
    user.status = data.status
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, _: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    return MessageResponse(message="User deleted successfully")
