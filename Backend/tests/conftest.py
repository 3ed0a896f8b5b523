"""
Shared pytest fixtures.

Every test gets its own SQLite database file. The FastAPI client overrides
``get_db``, ``get_storage`` and ``get_availability_notifier`` so that no test
touches Firebase or the detached background pool.
"""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="pharmahub-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'app.db')}")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import Base, build_engine, get_db
import models  # noqa: F401
from models.admin import Admin
from models.medicine import AvailabilityStatus, Medicine
from models.medicine_subscription import MedicineSubscription
from models.pharmacy import Pharmacy, PharmacyOwner
from models.user import User
from services.security import hash_password


class FakeStorage:
    """In-memory stand-in for FirebaseImageStorage."""

    base_url = "https://storage.googleapis.com/test-bucket"

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []

    def upload(self, content: bytes, content_type: str, path: str) -> str:
        url = f"{self.base_url}/{path}"
        self.objects[url] = content
        return url

    def upload_image(self, content: bytes, filename: str, content_type: str, folder: str = "medicines") -> str:
        return self.upload(content, content_type, f"{folder}/{len(self.objects)}-{filename}")

    def delete(self, url: str | None) -> None:
        if url:
            self.deleted.append(url)
            self.objects.pop(url, None)


class RecordingNotifier:
    def __init__(self):
        self.calls: list[tuple[str, str, str]] = []

    def schedule(self, pharmacy_id: str, medicine_name: str, pharmacy_name: str = ""):
        self.calls.append((pharmacy_id, medicine_name, pharmacy_name))
        return None


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# COLLABORATORS
# ============================================================================


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


# ============================================================================
# DATA FACTORIES
# ============================================================================


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(notifications_enabled=None, **overrides) -> User:
        counter["n"] += 1
        data = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "password_hash": hash_password("secret123"),
            "notifications_enabled": notifications_enabled,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_pharmacy(db):
    counter = {"n": 0}

    def _make(title: str | None = None) -> tuple[Pharmacy, PharmacyOwner]:
        counter["n"] += 1
        owner = PharmacyOwner(
            name=f"Owner {counter['n']}",
            email=f"owner{counter['n']}@example.com",
            password_hash=hash_password("secret123"),
        )
        db.add(owner)
        db.flush()
        pharmacy = Pharmacy(
            title=title or f"Pharmacy {counter['n']}",
            description="",
            location={"latitude": 31.9539, "longitude": 35.9106},
            working_hours=[],
            owner_id=owner.id,
        )
        db.add(pharmacy)
        db.flush()
        owner.pharmacy_id = pharmacy.id
        db.commit()
        db.refresh(pharmacy)
        db.refresh(owner)
        return pharmacy, owner

    return _make


@pytest.fixture
def make_medicine(db):
    def _make(title: str = "Paracetamol 500mg", status=AvailabilityStatus.available) -> Medicine:
        med = Medicine(
            title=title,
            description="",
            front_image_url=f"{FakeStorage.base_url}/medicines/front.png",
            back_image_url=f"{FakeStorage.base_url}/medicines/back.png",
            status=status,
        )
        db.add(med)
        db.commit()
        db.refresh(med)
        return med

    return _make


@pytest.fixture
def make_subscription(db):
    def _make(user_id: str, pharmacy_id: str, medicine_name: str, **overrides) -> MedicineSubscription:
        sub = MedicineSubscription(
            user_id=user_id,
            pharmacy_id=pharmacy_id,
            medicine_name=medicine_name,
            pharmacy_name="",
            **overrides,
        )
        db.add(sub)
        db.commit()
        db.refresh(sub)
        return sub

    return _make


# ============================================================================
# HTTP CLIENT
# ============================================================================


@pytest.fixture
def client(session_factory, storage, notifier):
    from main import app
    from dependencies import get_availability_notifier, get_storage

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_availability_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_header():
    from dependencies import create_access_token

    def _header(account_id: str, role: str) -> dict:
        token = create_access_token({"sub": account_id, "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def admin(db) -> Admin:
    row = Admin(name="Root", email="root@example.com", password_hash=hash_password("admin-pass"))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
