"""
Two-party chat between a user and a pharmacy owner.

A conversation row per (user, pharmacy owner) pair carries a denormalised
preview of its latest message plus one unread counter per side. Sending a
message commits the message first and then refreshes that aggregate in a
separate, best-effort step: a failure there is logged and the message still
counts as sent, so the preview may briefly lag behind the messages table.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import CHAT_IMAGE_MAX_BYTES
from models.chat import (
    Conversation,
    ConversationStatus,
    Message,
    MessageStatus,
    MessageType,
    SenderType,
)
from services.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

IMAGE_PREVIEW = "[Image]"
DEFAULT_PAGE_SIZE = 50
CONVERSATION_LIST_LIMIT = 100
CHAT_IMAGE_FOLDER = "chat-images"
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


def derive_message_type(content: str | None, image_url: str | None) -> MessageType:
    if content and image_url:
        return MessageType.text_image
    if image_url:
        return MessageType.image
    return MessageType.text


def _unread_column(side: SenderType):
    if side is SenderType.user:
        return Conversation.unread_count_user
    if side is SenderType.pharmacy_owner:
        return Conversation.unread_count_pharmacy_owner
    raise ValueError(f"Unknown sender type: {side!r}")


def _counterpart(side: SenderType) -> SenderType:
    if side is SenderType.user:
        return SenderType.pharmacy_owner
    if side is SenderType.pharmacy_owner:
        return SenderType.user
    raise ValueError(f"Unknown sender type: {side!r}")


def _find_pair(db: Session, user_id: str, pharmacy_owner_id: str) -> Conversation | None:
    return (
        db.query(Conversation)
        .filter(Conversation.user_id == user_id, Conversation.pharmacy_owner_id == pharmacy_owner_id)
        .first()
    )


def get_or_create_conversation(db: Session, user_id: str, pharmacy_owner_id: str, pharmacy_id: str) -> Conversation:
    """The (user, owner) pair is the identity; ``pharmacy_id`` is only used on create."""
    existing = _find_pair(db, user_id, pharmacy_owner_id)
    if existing:
        return existing

    conversation = Conversation(
        user_id=user_id,
        pharmacy_owner_id=pharmacy_owner_id,
        pharmacy_id=pharmacy_id,
        last_message="",
        last_message_type=MessageType.text,
        last_message_sender_id="",
        last_message_sender_type=SenderType.user,
        unread_count_user=0,
        unread_count_pharmacy_owner=0,
        status=ConversationStatus.active,
    )
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        # Lost a create race for the same pair.
        db.rollback()
        existing = _find_pair(db, user_id, pharmacy_owner_id)
        if existing:
            return existing
        raise
    db.refresh(conversation)
    return conversation


def get_conversation(db: Session, conversation_id: str) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if not conversation:
        raise NotFoundError("Conversation not found")
    return conversation


def list_user_conversations(db: Session, user_id: str) -> list[Conversation]:
    return (
        db.query(Conversation)
        .filter(Conversation.user_id == user_id, Conversation.status == ConversationStatus.active)
        .order_by(Conversation.last_message_at.desc())
        .limit(CONVERSATION_LIST_LIMIT)
        .all()
    )


def list_owner_conversations(db: Session, pharmacy_owner_id: str) -> list[Conversation]:
    return (
        db.query(Conversation)
        .filter(
            Conversation.pharmacy_owner_id == pharmacy_owner_id,
            Conversation.status == ConversationStatus.active,
        )
        .order_by(Conversation.last_message_at.desc())
        .limit(CONVERSATION_LIST_LIMIT)
        .all()
    )


def send_message(
    db: Session,
    conversation_id: str,
    sender_id: str,
    sender_type: SenderType,
    content: str | None = None,
    image_url: str | None = None,
    sender_name: str = "Unknown User",
) -> Message:
    if not content and not image_url:
        raise BadRequestError("Message must contain text or image")
    sender_type = SenderType(sender_type)

    message_type = derive_message_type(content, image_url)
    message = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        sender_type=sender_type,
        sender_name=sender_name,
        content=content or "",
        image_url=image_url or None,
        type=message_type,
        status=MessageStatus.sent,
    )
    db.add(message)
    db.commit()
    db.refresh(message)

    _refresh_conversation_preview(db, message)
    return message


def _refresh_conversation_preview(db: Session, message: Message) -> None:
    unread = _unread_column(_counterpart(message.sender_type))
    try:
        updated = (
            db.query(Conversation)
            .filter(Conversation.id == message.conversation_id)
            .update(
                {
                    Conversation.last_message: message.content or IMAGE_PREVIEW,
                    Conversation.last_message_type: message.type,
                    Conversation.last_message_at: message.created_at,
                    Conversation.last_message_sender_id: message.sender_id,
                    Conversation.last_message_sender_type: message.sender_type,
                    unread: unread + 1,
                    Conversation.updated_at: datetime.now(timezone.utc),
                },
                synchronize_session=False,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update conversation %s after message %s", message.conversation_id, message.id)
        return
    if not updated:
        logger.warning("Message %s sent to unknown conversation %s", message.id, message.conversation_id)


def get_messages(
    db: Session,
    conversation_id: str,
    limit: int = DEFAULT_PAGE_SIZE,
    last_message_id: str | None = None,
) -> list[Message]:
    """Newest first. ``last_message_id`` continues strictly after that message."""
    query = db.query(Message).filter(Message.conversation_id == conversation_id)
    if last_message_id:
        cursor = db.get(Message, last_message_id)
        if cursor:
            query = query.filter(
                or_(
                    Message.created_at < cursor.created_at,
                    and_(Message.created_at == cursor.created_at, Message.id < cursor.id),
                )
            )
    return query.order_by(Message.created_at.desc(), Message.id.desc()).limit(limit).all()


def mark_read(db: Session, conversation_id: str, reader_id: str, reader_type: SenderType) -> int:
    """Mark the counterpart's unread messages read and zero the reader's counter.

    Runs as one transaction. Returns how many messages changed.
    """
    reader_type = SenderType(reader_type)
    conversation = get_conversation(db, conversation_id)

    unread = (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id, Message.status != MessageStatus.read)
        .all()
    )
    to_mark = [m for m in unread if m.sender_id != reader_id]

    now = datetime.now(timezone.utc)
    try:
        for message in to_mark:
            message.status = MessageStatus.read
            message.read_at = now
        setattr(conversation, _unread_column(reader_type).key, 0)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return len(to_mark)


def archive_conversation(db: Session, conversation_id: str) -> Conversation:
    conversation = get_conversation(db, conversation_id)
    conversation.status = ConversationStatus.archived
    db.commit()
    db.refresh(conversation)
    return conversation


def upload_chat_image(storage, content: bytes, filename: str, content_type: str | None) -> str:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise BadRequestError("Only image files are allowed (jpeg, jpg, png, gif, webp)")
    if len(content) > CHAT_IMAGE_MAX_BYTES:
        raise BadRequestError("Image size must be less than 5MB")
    return storage.upload_image(content, filename, content_type, folder=CHAT_IMAGE_FOLDER)
