from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_users: int
    banned_users: int
    new_users_this_month: int
    total_pharmacies: int
    active_pharmacies: int
    inactive_pharmacies: int
    new_pharmacies_this_month: int
    total_pharmacy_owners: int
    total_medicines: int
    available_medicines: int
    unavailable_medicines: int
