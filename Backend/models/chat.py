from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Text, DateTime, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
import enum

from database import Base, generate_id


def _values(enum_cls):
    return [member.value for member in enum_cls]


def _utcnow():
    return datetime.now(timezone.utc)


class SenderType(str, enum.Enum):
    user = "user"
    pharmacy_owner = "pharmacy-owner"


class MessageType(str, enum.Enum):
    text = "text"
    image = "image"
    text_image = "text-image"


class MessageStatus(str, enum.Enum):
    sent = "sent"
    delivered = "delivered"
    read = "read"


class ConversationStatus(str, enum.Enum):
    active = "active"
    archived = "archived"


class Conversation(Base):
    __tablename__ = "conversations"
    __table_args__ = (UniqueConstraint("user_id", "pharmacy_owner_id", name="uq_conversation_pair"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), nullable=False, index=True)
    pharmacy_owner_id = Column(String(36), nullable=False, index=True)
    pharmacy_id = Column(String(36), nullable=False)
    last_message = Column(Text, nullable=False, default="")
    last_message_type = Column(
        SAEnum(MessageType, values_callable=_values, name="message_type"),
        default=MessageType.text,
        nullable=False,
    )
    last_message_at = Column(DateTime(timezone=True), default=_utcnow)
    last_message_sender_id = Column(String(36), nullable=False, default="")
    last_message_sender_type = Column(
        SAEnum(SenderType, values_callable=_values, name="sender_type"),
        default=SenderType.user,
        nullable=False,
    )
    unread_count_user = Column(Integer, default=0, nullable=False)
    unread_count_pharmacy_owner = Column(Integer, default=0, nullable=False)
    status = Column(
        SAEnum(ConversationStatus, values_callable=_values, name="conversation_status"),
        default=ConversationStatus.active,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    conversation_id = Column(String(36), nullable=False, index=True)
    sender_id = Column(String(36), nullable=False)
    sender_type = Column(SAEnum(SenderType, values_callable=_values, name="sender_type"), nullable=False)
    sender_name = Column(String(100), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)
    type = Column(SAEnum(MessageType, values_callable=_values, name="message_type"), nullable=False)
    status = Column(
        SAEnum(MessageStatus, values_callable=_values, name="message_status"),
        default=MessageStatus.sent,
        nullable=False,
    )
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    read_at = Column(DateTime(timezone=True), nullable=True)
    # Set in Python for sub-second resolution; pages are ordered by (created_at, id).
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
