from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from dependencies import Principal, get_storage, require_admin
from models.pharmacy import Pharmacy, PharmacyOwner, PHARMACY_OWNER_ROLE
from models.pharmacy_medicine import PharmacyMedicine
from schemas.common import MessageResponse
from schemas.pharmacy import (
    ImageUploadResponse,
    PharmacyCreate,
    PharmacyOut,
    PharmacyOwnerOut,
    PharmacyUpdate,
    PharmacyWithOwnerOut,
)
from services.security import hash_password

router = APIRouter(prefix="/pharmacies", tags=["Pharmacies"])
OWNER_FIELDS = {"owner_name", "owner_email", "owner_password"}


def _get_pharmacy_or_404(db: Session, pharmacy_id: str) -> Pharmacy:
    pharmacy = db.get(Pharmacy, pharmacy_id)
    if not pharmacy:
        raise HTTPException(status_code=404, detail="Pharmacy not found")
    return pharmacy


def _with_owner(pharmacy: Pharmacy, owner: PharmacyOwner | None) -> PharmacyWithOwnerOut:
    data = PharmacyOut.model_validate(pharmacy).model_dump()
    return PharmacyWithOwnerOut(**data, owner=PharmacyOwnerOut.model_validate(owner) if owner else None)


def _owner_email_taken(db: Session, email: str, exclude_id: str | None = None) -> bool:
    q = db.query(PharmacyOwner).filter(PharmacyOwner.email == email)
    if exclude_id:
        q = q.filter(PharmacyOwner.id != exclude_id)
    return q.first() is not None


@router.post("/upload-image", response_model=ImageUploadResponse)
def upload_pharmacy_image(
    file: UploadFile = File(...),
    _: Principal = Depends(require_admin),
    storage=Depends(get_storage),
):
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    image_url = storage.upload_image(file.file.read(), file.filename, file.content_type, folder="pharmacies")
    return ImageUploadResponse(image_url=image_url)


@router.post("", response_model=PharmacyWithOwnerOut, status_code=201)
def create_pharmacy(
    data: PharmacyCreate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a pharmacy together with its owner account."""
    owner_email = data.owner_email.strip().lower()
    if _owner_email_taken(db, owner_email):
        raise HTTPException(status_code=409, detail="Pharmacy owner with this email already exists")

    owner = PharmacyOwner(
        name=data.owner_name,
        email=owner_email,
        password_hash=hash_password(data.owner_password),
        role=PHARMACY_OWNER_ROLE,
        created_by=principal.id,
    )
    db.add(owner)
    db.flush()

    payload = data.model_dump(exclude=OWNER_FIELDS)
    pharmacy = Pharmacy(**payload, owner_id=owner.id, created_by=principal.id)
    db.add(pharmacy)
    db.flush()

    owner.pharmacy_id = pharmacy.id
    db.commit()
    db.refresh(pharmacy)
    db.refresh(owner)
    return _with_owner(pharmacy, owner)


@router.get("", response_model=list[PharmacyWithOwnerOut])
def list_pharmacies(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    pharmacies = db.query(Pharmacy).order_by(Pharmacy.created_at.desc()).all()
    owners = {o.id: o for o in db.query(PharmacyOwner).all()}
    return [_with_owner(p, owners.get(p.owner_id)) for p in pharmacies]


@router.get("/search", response_model=list[PharmacyOut])
def search_pharmacies(
    q: str = Query(min_length=1),
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    pattern = f"%{q.strip()}%"
    return (
        db.query(Pharmacy)
        .filter(or_(Pharmacy.title.ilike(pattern), Pharmacy.description.ilike(pattern)))
        .order_by(Pharmacy.created_at.desc())
        .all()
    )


@router.get("/owners/all", response_model=list[PharmacyOwnerOut])
def list_pharmacy_owners(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return db.query(PharmacyOwner).order_by(PharmacyOwner.created_at.desc()).all()


@router.get("/owners/{owner_id}", response_model=PharmacyOwnerOut)
def get_pharmacy_owner(owner_id: str, _: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    owner = db.get(PharmacyOwner, owner_id)
    if not owner:
        raise HTTPException(status_code=404, detail="Pharmacy owner not found")
    return owner


@router.get("/{pharmacy_id}", response_model=PharmacyWithOwnerOut)
def get_pharmacy(pharmacy_id: str, _: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    pharmacy = _get_pharmacy_or_404(db, pharmacy_id)
    owner = db.get(PharmacyOwner, pharmacy.owner_id) if pharmacy.owner_id else None
    return _with_owner(pharmacy, owner)


@router.patch("/{pharmacy_id}", response_model=PharmacyWithOwnerOut)
def update_pharmacy(
    pharmacy_id: str,
    data: PharmacyUpdate,
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    pharmacy = _get_pharmacy_or_404(db, pharmacy_id)
    owner = db.get(PharmacyOwner, pharmacy.owner_id) if pharmacy.owner_id else None
    update_data = data.model_dump(exclude_unset=True)
    owner_data = {k: update_data.pop(k) for k in OWNER_FIELDS if k in update_data}

    if owner_data and owner:
        if owner_data.get("owner_email"):
            email = owner_data["owner_email"].strip().lower()
            if _owner_email_taken(db, email, exclude_id=owner.id):
                raise HTTPException(status_code=409, detail="Email already in use")
            owner.email = email
        if owner_data.get("owner_name"):
            owner.name = owner_data["owner_name"]
        if owner_data.get("owner_password"):
            owner.password_hash = hash_password(owner_data["owner_password"])

    old_image = pharmacy.image_url
    for key, value in update_data.items():
        setattr(pharmacy, key, value)
    db.commit()
    db.refresh(pharmacy)

    if "image_url" in update_data and old_image and old_image != pharmacy.image_url:
        storage.delete(old_image)
    if owner:
        db.refresh(owner)
    return _with_owner(pharmacy, owner)


@router.delete("/{pharmacy_id}", response_model=MessageResponse)
def delete_pharmacy(
    pharmacy_id: str,
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    """Delete the pharmacy, its owner account and its inventory rows."""
    pharmacy = _get_pharmacy_or_404(db, pharmacy_id)
    if pharmacy.image_url:
        storage.delete(pharmacy.image_url)
    if pharmacy.owner_id:
        db.query(PharmacyOwner).filter(PharmacyOwner.id == pharmacy.owner_id).delete(synchronize_session=False)
    db.query(PharmacyMedicine).filter(PharmacyMedicine.pharmacy_id == pharmacy.id).delete(synchronize_session=False)
    db.delete(pharmacy)
    db.commit()
    return MessageResponse(message="Pharmacy deleted successfully")
