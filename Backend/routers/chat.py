from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from config import CHAT_IMAGE_MAX_BYTES
from database import get_db
from dependencies import Principal, get_current_principal, get_storage
from models.chat import SenderType
from schemas.chat import (
    ChatImageUploadResponse,
    ConversationCreate,
    ConversationOut,
    MarkReadRequest,
    MarkReadResponse,
    MessageOut,
    SendMessageRequest,
)
from services import chat as chat_service

router = APIRouter(prefix="/chat", tags=["Chat"])


def _ensure_acting_as(principal: Principal, account_id: str, side: SenderType) -> None:
    if principal.id != account_id or principal.role != side.value:
        raise HTTPException(status_code=403, detail="You can only act as yourself in a conversation")


def _ensure_participant(principal: Principal, conversation) -> None:
    if principal.id not in (conversation.user_id, conversation.pharmacy_owner_id):
        raise HTTPException(status_code=403, detail="Not a participant of this conversation")


def _ensure_holds_side(conversation, account_id: str, side: SenderType) -> None:
    held = conversation.user_id if side == SenderType.user else conversation.pharmacy_owner_id
    if held != account_id:
        raise HTTPException(status_code=403, detail="Not a participant of this conversation")


@router.post("/conversations", response_model=ConversationOut)
def get_or_create_conversation(
    data: ConversationCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    if principal.id not in (data.user_id, data.pharmacy_owner_id):
        raise HTTPException(status_code=403, detail="Not a participant of this conversation")
    return chat_service.get_or_create_conversation(db, data.user_id, data.pharmacy_owner_id, data.pharmacy_id)


@router.get("/conversations/user/{user_id}", response_model=list[ConversationOut])
def list_user_conversations(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_acting_as(principal, user_id, SenderType.user)
    return chat_service.list_user_conversations(db, user_id)


@router.get("/conversations/pharmacy-owner/{owner_id}", response_model=list[ConversationOut])
def list_owner_conversations(
    owner_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_acting_as(principal, owner_id, SenderType.pharmacy_owner)
    return chat_service.list_owner_conversations(db, owner_id)


@router.get("/conversations/{conversation_id}", response_model=ConversationOut)
def get_conversation(
    conversation_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    conversation = chat_service.get_conversation(db, conversation_id)
    _ensure_participant(principal, conversation)
    return conversation


@router.post("/messages", response_model=MessageOut, status_code=201)
def send_message(
    data: SendMessageRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_acting_as(principal, data.sender_id, data.sender_type)
    _ensure_holds_side(chat_service.get_conversation(db, data.conversation_id), data.sender_id, data.sender_type)
    return chat_service.send_message(
        db,
        data.conversation_id,
        data.sender_id,
        data.sender_type,
        content=data.content,
        image_url=data.image_url,
        sender_name=data.sender_name,
    )


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageOut])
def get_messages(
    conversation_id: str,
    limit: int = Query(chat_service.DEFAULT_PAGE_SIZE, ge=1, le=200),
    last_message_id: str | None = Query(default=None),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_participant(principal, chat_service.get_conversation(db, conversation_id))
    return chat_service.get_messages(db, conversation_id, limit=limit, last_message_id=last_message_id)


@router.patch("/messages/mark-read", response_model=MarkReadResponse)
def mark_messages_read(
    data: MarkReadRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_acting_as(principal, data.reader_id, data.reader_type)
    _ensure_holds_side(chat_service.get_conversation(db, data.conversation_id), data.reader_id, data.reader_type)
    marked = chat_service.mark_read(db, data.conversation_id, data.reader_id, data.reader_type)
    return MarkReadResponse(marked_count=marked)


@router.post("/upload-image", response_model=ChatImageUploadResponse)
def upload_chat_image(
    file: UploadFile = File(...),
    _: Principal = Depends(get_current_principal),
    storage=Depends(get_storage),
):
    content = file.file.read(CHAT_IMAGE_MAX_BYTES + 1)
    image_url = chat_service.upload_chat_image(storage, content, file.filename, file.content_type)
    return ChatImageUploadResponse(image_url=image_url)


@router.patch("/conversations/{conversation_id}/archive", response_model=ConversationOut)
def archive_conversation(
    conversation_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _ensure_participant(principal, chat_service.get_conversation(db, conversation_id))
    return chat_service.archive_conversation(db, conversation_id)
