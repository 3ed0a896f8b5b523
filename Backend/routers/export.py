import time

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_db
from dependencies import Principal, require_admin
from services import export as export_service

router = APIRouter(prefix="/admin/export", tags=["Export"])


def _xlsx_response(content: bytes, kind: str) -> Response:
    return Response(
        content=content,
        media_type=export_service.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={kind}-{int(time.time() * 1000)}.xlsx"},
    )


@router.get("/medicines")
def export_medicines(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _xlsx_response(export_service.export_medicines(db), "medicines")


@router.get("/pharmacy-owners")
def export_pharmacy_owners(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _xlsx_response(export_service.export_pharmacy_owners(db), "pharmacy-owners")


@router.get("/pharmacies")
def export_pharmacies(_: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    return _xlsx_response(export_service.export_pharmacies(db), "pharmacies")
