"""Seed the database with a first admin account and a starter medicine catalog."""

import os

from database import SessionLocal, Base, engine
import models  # noqa: F401
from models.admin import Admin
from models.medicine import AvailabilityStatus, Medicine
from services.security import hash_password

Base.metadata.create_all(bind=engine)

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@pharmahub.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "change-me-now")
PLACEHOLDER_IMAGE = "https://storage.googleapis.com/pharmahub-public/placeholders/medicine.png"

MEDICINES = [
    {"title": "Paracetamol 500mg", "description": "Pain and fever relief, 20 tablets"},
    {"title": "Ibuprofen 400mg", "description": "Anti-inflammatory pain relief, 50 tablets"},
    {"title": "Amoxicillin 500mg", "description": "Antibiotic capsules, prescription only"},
    {"title": "Cetirizine 10mg", "description": "Antihistamine for allergies, 30 tablets"},
    {"title": "Vitamin D3 1000 IU", "description": "Daily supplement, 60 softgels"},
    {"title": "Omeprazole 20mg", "description": "Acid reflux relief, 14 capsules"},
]


def seed():
    db = SessionLocal()
    try:
        admin = db.query(Admin).filter(Admin.email == ADMIN_EMAIL).first()
        if not admin:
            admin = Admin(name="Administrator", email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD))
            db.add(admin)
            db.flush()
            print(f"Created admin {ADMIN_EMAIL}.")

        existing = db.query(Medicine).count()
        if existing > 0:
            print(f"Database already has {existing} medicines, skipping catalog seed.")
        else:
            for m in MEDICINES:
                db.add(
                    Medicine(
                        **m,
                        front_image_url=PLACEHOLDER_IMAGE,
                        back_image_url=PLACEHOLDER_IMAGE,
                        status=AvailabilityStatus.available,
                        created_by=admin.id,
                    )
                )
            print(f"Seeded {len(MEDICINES)} medicines.")
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
