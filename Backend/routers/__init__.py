from routers.auth import router as auth_router
from routers.users import router as users_router
from routers.pharmacies import router as pharmacies_router
from routers.medicines import router as medicines_router
from routers.pharmacy_owner import router as pharmacy_owner_router
from routers.notifications import router as notifications_router
from routers.chat import router as chat_router
from routers.export import router as export_router
from routers.dashboard import router as dashboard_router

__all__ = [
    "auth_router",
    "users_router",
    "pharmacies_router",
    "medicines_router",
    "pharmacy_owner_router",
    "notifications_router",
    "chat_router",
    "export_router",
    "dashboard_router",
]
