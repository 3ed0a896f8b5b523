from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from database import get_db
from dependencies import Principal, get_current_principal, get_storage, require_admin
from models.medicine import AvailabilityStatus, Medicine
from schemas.common import MessageResponse
from schemas.medicine import MedicineOut

router = APIRouter(prefix="/medicines", tags=["Medicines"])
MEDICINE_IMAGE_FOLDER = "medicines"


def _get_medicine_or_404(db: Session, medicine_id: str) -> Medicine:
    med = db.get(Medicine, medicine_id)
    if not med:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return med


def _store_image(storage, upload: UploadFile) -> str:
    if not (upload.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    return storage.upload_image(upload.file.read(), upload.filename, upload.content_type, folder=MEDICINE_IMAGE_FOLDER)


@router.post("", response_model=MedicineOut, status_code=201)
def create_medicine(
    title: str = Form(..., min_length=1, max_length=200),
    description: str = Form(""),
    status: AvailabilityStatus = Form(AvailabilityStatus.available),
    front_image: UploadFile | None = File(None),
    back_image: UploadFile | None = File(None),
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    """Create a catalog medicine. Both package images are required."""
    if not front_image or not back_image:
        raise HTTPException(status_code=400, detail="Both front and back images are required")
    med = Medicine(
        title=title.strip(),
        description=description,
        status=status,
        front_image_url=_store_image(storage, front_image),
        back_image_url=_store_image(storage, back_image),
        created_by=principal.id,
    )
    db.add(med)
    db.commit()
    db.refresh(med)
    return med


@router.get("", response_model=list[MedicineOut])
def list_medicines(
    status: AvailabilityStatus | None = Query(default=None),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List catalog medicines, newest first, optionally filtered by status."""
    q = db.query(Medicine)
    if status:
        q = q.filter(Medicine.status == status)
    return q.order_by(Medicine.created_at.desc()).all()


@router.get("/search", response_model=list[MedicineOut])
def search_medicines(
    q: str = Query(min_length=1),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return (
        db.query(Medicine)
        .filter(Medicine.title.ilike(f"%{q.strip()}%"))
        .order_by(Medicine.title.asc())
        .all()
    )


@router.get("/{medicine_id}", response_model=MedicineOut)
def get_medicine(
    medicine_id: str,
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return _get_medicine_or_404(db, medicine_id)


@router.patch("/{medicine_id}", response_model=MedicineOut)
def update_medicine(
    medicine_id: str,
    title: str | None = Form(None, min_length=1, max_length=200),
    description: str | None = Form(None),
    status: AvailabilityStatus | None = Form(None),
    front_image: UploadFile | None = File(None),
    back_image: UploadFile | None = File(None),
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    med = _get_medicine_or_404(db, medicine_id)
    replaced = []
    if front_image:
        replaced.append(med.front_image_url)
        med.front_image_url = _store_image(storage, front_image)
    if back_image:
        replaced.append(med.back_image_url)
        med.back_image_url = _store_image(storage, back_image)
    if title is not None:
        med.title = title.strip()
    if description is not None:
        med.description = description
    if status is not None:
        med.status = status
    db.commit()
    db.refresh(med)

    for url in replaced:
        storage.delete(url)
    return med


@router.delete("/{medicine_id}", response_model=MessageResponse)
def delete_medicine(
    medicine_id: str,
    _: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    med = _get_medicine_or_404(db, medicine_id)
    storage.delete(med.front_image_url)
    storage.delete(med.back_image_url)
    db.delete(med)
    db.commit()
    return MessageResponse(message="Medicine deleted successfully")
