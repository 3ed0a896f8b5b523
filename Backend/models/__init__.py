from models.admin import Admin
from models.user import User, UserStatus
from models.pharmacy import Pharmacy, PharmacyOwner, AccountStatus
from models.medicine import Medicine, AvailabilityStatus
from models.pharmacy_medicine import PharmacyMedicine
from models.medicine_subscription import MedicineSubscription
from models.chat import Conversation, Message, SenderType, MessageType, MessageStatus, ConversationStatus

__all__ = [
    "Admin",
    "User",
    "UserStatus",
    "Pharmacy",
    "PharmacyOwner",
    "AccountStatus",
    "Medicine",
    "AvailabilityStatus",
    "PharmacyMedicine",
    "MedicineSubscription",
    "Conversation",
    "Message",
    "SenderType",
    "MessageType",
    "MessageStatus",
    "ConversationStatus",
]
