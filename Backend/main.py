import os
import json
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import firebase_admin
from firebase_admin import credentials

from config import CORS_ORIGINS, FIREBASE_SERVICE_ACCOUNT, FIREBASE_STORAGE_BUCKET, LOG_DIR
from database import Base, engine
import models  # noqa: F401  registers every table on Base.metadata
from routers import (
    auth_router,
    users_router,
    pharmacies_router,
    medicines_router,
    pharmacy_owner_router,
    notifications_router,
    chat_router,
    export_router,
    dashboard_router,
)
from services.errors import ServiceError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("pharmahub")


def init_firebase() -> None:
    if firebase_admin._apps:
        return
    options = {"storageBucket": FIREBASE_STORAGE_BUCKET} if FIREBASE_STORAGE_BUCKET else None
    if FIREBASE_SERVICE_ACCOUNT:
        # Hosting dashboards sometimes wrap the JSON in an extra pair of quotes.
        cleaned = FIREBASE_SERVICE_ACCOUNT.strip().strip("'")
        try:
            sa_dict = json.loads(cleaned)
        except json.JSONDecodeError:
            logger.error("FIREBASE_SERVICE_ACCOUNT is not valid JSON; image storage disabled")
            return
        if "\\n" in sa_dict.get("private_key", ""):
            sa_dict["private_key"] = sa_dict["private_key"].replace("\\n", "\n")
        firebase_admin.initialize_app(credentials.Certificate(sa_dict), options)
        logger.info("Firebase Admin SDK initialized")
        return
    logger.warning("FIREBASE_SERVICE_ACCOUNT not set, falling back to application default credentials")
    try:
        firebase_admin.initialize_app(options=options)
    except (ValueError, OSError) as exc:
        logger.warning("Firebase Admin SDK not initialized: %s", exc)


init_firebase()

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="PharmaHub API",
    description="Pharmacy directory backend: inventory, availability alerts, chat and admin export",
    version="1.0.0",
)

os.makedirs(LOG_DIR, exist_ok=True)
error_log_file = os.path.join(LOG_DIR, "errors.log")
error_logger = logging.getLogger("pharmahub.errors")
if not error_logger.handlers:
    error_logger.setLevel(logging.ERROR)
    fh = logging.FileHandler(error_log_file, encoding="utf-8")
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    error_logger.addHandler(fh)
    error_logger.propagate = False

cors_origins = [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()]
allow_any_origin = "*" in cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_any_origin else cors_origins,
    # Browsers reject wildcard+credentials; keep credentials off for bearer-token API calls.
    allow_credentials=not allow_any_origin,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(pharmacies_router)
app.include_router(medicines_router)
app.include_router(pharmacy_owner_router)
app.include_router(notifications_router)
app.include_router(chat_router)
app.include_router(export_router)
app.include_router(dashboard_router)


@app.exception_handler(ServiceError)
async def _service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        error_logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.middleware("http")
async def _capture_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:  # pragma: no cover
        error_logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", tags=["Health"])
def health_check():
    return {"status": "ok", "service": "PharmaHub API", "version": "1.0.0"}
