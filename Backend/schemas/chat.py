from datetime import datetime

from pydantic import BaseModel, Field

from models.chat import ConversationStatus, MessageStatus, MessageType, SenderType


class ConversationCreate(BaseModel):
    user_id: str
    pharmacy_owner_id: str
    pharmacy_id: str


class SendMessageRequest(BaseModel):
    conversation_id: str
    sender_id: str
    sender_type: SenderType
    sender_name: str = "Unknown User"
    content: str | None = Field(default=None, max_length=4000)
    image_url: str | None = None


class MarkReadRequest(BaseModel):
    conversation_id: str
    reader_id: str
    reader_type: SenderType


class MarkReadResponse(BaseModel):
    success: bool = True
    marked_count: int


class ConversationOut(BaseModel):
    id: str
    user_id: str
    pharmacy_owner_id: str
    pharmacy_id: str
    last_message: str
    last_message_type: MessageType
    last_message_at: datetime | None
    last_message_sender_id: str
    last_message_sender_type: SenderType
    unread_count_user: int
    unread_count_pharmacy_owner: int
    status: ConversationStatus
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class MessageOut(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    sender_type: SenderType
    sender_name: str
    content: str
    image_url: str | None = None
    type: MessageType
    status: MessageStatus
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class ChatImageUploadResponse(BaseModel):
    image_url: str
