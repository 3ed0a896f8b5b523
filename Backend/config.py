import os

# Render provides DATABASE_URL starting with "postgres://..."
# SQLAlchemy 2.x requires "postgresql://...", so patch it here.
_raw_db_url = os.getenv("DATABASE_URL", "sqlite:///./pharmahub.db")
DATABASE_URL = _raw_db_url.replace("postgres://", "postgresql://", 1)

SECRET_KEY = os.getenv("SECRET_KEY", "pharmahub-secret-key-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))  # 7 days

# Firebase: FIREBASE_SERVICE_ACCOUNT holds the service account JSON inline.
FIREBASE_SERVICE_ACCOUNT = os.getenv("FIREBASE_SERVICE_ACCOUNT", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
FIREBASE_STORAGE_BUCKET = os.getenv(
    "FIREBASE_STORAGE_BUCKET",
    f"{FIREBASE_PROJECT_ID}.appspot.com" if FIREBASE_PROJECT_ID else "",
)

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

# Availability checks: detached tasks run on the background pool, each
# check fans out over its matching subscriptions on a per-call pool.
NOTIFY_MAX_WORKERS = int(os.getenv("NOTIFY_MAX_WORKERS", "6"))
NOTIFY_FANOUT_WORKERS = int(os.getenv("NOTIFY_FANOUT_WORKERS", "8"))

CHAT_IMAGE_MAX_BYTES = int(os.getenv("CHAT_IMAGE_MAX_BYTES", str(5 * 1024 * 1024)))

LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "logs"))
