"""Spreadsheet exports for the admin panel, built with openpyxl."""
import io
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from models.medicine import AvailabilityStatus, Medicine
from models.pharmacy import AccountStatus, Pharmacy, PharmacyOwner

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MISSING = "N/A"

_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="0D9488", end_color="0D9488", fill_type="solid")
_CELL_ALIGNMENT = Alignment(horizontal="left", vertical="center")

MEDICINE_COLUMNS = [("Medicine Name", 30), ("Description", 50), ("Status", 15), ("Created Date", 20), ("Updated Date", 20)]
OWNER_COLUMNS = [("Owner Name", 30), ("Email", 35), ("Status", 15), ("Pharmacy Name", 30), ("Created Date", 20)]
PHARMACY_COLUMNS = [
    ("Pharmacy Name", 30),
    ("Location", 40),
    ("Status", 15),
    ("Owner Name", 30),
    ("Owner Email", 35),
    ("Created Date", 20),
]


def format_date(value: datetime | None) -> str:
    if not value:
        return MISSING
    return value.strftime("%m/%d/%Y %H:%M")


def format_location(location: dict | None) -> str:
    if not location:
        return MISSING
    if location.get("address"):
        return location["address"]
    lat, lng = location.get("latitude"), location.get("longitude")
    if lat is None or lng is None:
        return MISSING
    return f"{lat:.4f}, {lng:.4f}"


def _status_label(active: bool) -> str:
    return "Active" if active else "Inactive"


def _build_workbook(title: str, columns: list[tuple[str, int]], rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title

    for col, (header, width) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _CELL_ALIGNMENT
        ws.column_dimensions[get_column_letter(col)].width = width

    for row_num, values in enumerate(rows, 2):
        for col, value in enumerate(values, 1):
            ws.cell(row=row_num, column=col, value=value).alignment = _CELL_ALIGNMENT

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_medicines(db: Session) -> bytes:
    medicines = db.query(Medicine).order_by(Medicine.created_at.desc()).all()
    rows = [
        [
            m.title,
            m.description or "",
            _status_label(m.status == AvailabilityStatus.available),
            format_date(m.created_at),
            format_date(m.updated_at),
        ]
        for m in medicines
    ]
    return _build_workbook("Medicines", MEDICINE_COLUMNS, rows)


def export_pharmacy_owners(db: Session) -> bytes:
    owners = db.query(PharmacyOwner).order_by(PharmacyOwner.created_at.desc()).all()
    # The pharmacy row is authoritative for who owns what.
    pharmacy_by_owner = {
        p.owner_id: p.title for p in db.query(Pharmacy.owner_id, Pharmacy.title).all() if p.owner_id
    }
    rows = [
        [
            o.name,
            o.email,
            _status_label(o.status == AccountStatus.active),
            pharmacy_by_owner.get(o.id) or MISSING,
            format_date(o.created_at),
        ]
        for o in owners
    ]
    return _build_workbook("Pharmacy Owners", OWNER_COLUMNS, rows)


def export_pharmacies(db: Session) -> bytes:
    pharmacies = db.query(Pharmacy).order_by(Pharmacy.created_at.desc()).all()
    owners = {o.id: o for o in db.query(PharmacyOwner).all()}
    rows = []
    for p in pharmacies:
        owner = owners.get(p.owner_id)
        rows.append(
            [
                p.title,
                format_location(p.location),
                _status_label(p.status == AccountStatus.active),
                owner.name if owner else MISSING,
                owner.email if owner else MISSING,
                format_date(p.created_at),
            ]
        )
    return _build_workbook("Pharmacies", PHARMACY_COLUMNS, rows)
