"""Direct messages between users, and user-to-user blocking.

A message sent to someone who has blocked the sender is still stored, with
``is_blocked`` frozen to True. The recipient never sees it. The sender is not
told (shadow block) and still sees it in their own history.
"""

import logging
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from estatehub.core.exceptions import MarketplaceError, NotFound
from estatehub.models.message import Block, Message
from estatehub.models.property import Property
from estatehub.models.user import User
from estatehub.services import auth_service

logger = logging.getLogger(__name__)


def _between(user_id: UUID, other_user_id: UUID):
    return or_(
        and_(Message.sender_id == user_id, Message.recipient_id == other_user_id),
        and_(Message.sender_id == other_user_id, Message.recipient_id == user_id),
    )


def _visible_to(user_id: UUID):
    # Blocked messages stay hidden from their recipient only
    return or_(Message.recipient_id != user_id, Message.is_blocked.is_(False))


def resolve_recipient(db: Session, recipient: Union[str, UUID]) -> Optional[User]:
    if isinstance(recipient, UUID):
        return auth_service.get_user_by_id(db, recipient)
    try:
        return auth_service.get_user_by_id(db, UUID(str(recipient).strip()))
    except ValueError:
        return auth_service.get_user_by_email(db, recipient)


# ─── Blocking ─────────────────────────────────────────────────────────────────

def is_blocked(db: Session, blocker_id: UUID, blocked_id: UUID) -> bool:
    return db.query(
        db.query(Block)
        .filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        .exists()
    ).scalar()


def block_user(db: Session, blocker_id: UUID, blocked_id: UUID) -> None:
    if blocker_id == blocked_id:
        raise MarketplaceError("You cannot block yourself")
    auth_service.get_user_or_404(db, blocked_id)
    if is_blocked(db, blocker_id, blocked_id):
        return
    db.add(Block(blocker_id=blocker_id, blocked_id=blocked_id))
    db.commit()
    logger.info("User %s blocked %s", blocker_id, blocked_id)


def unblock_user(db: Session, blocker_id: UUID, blocked_id: UUID) -> None:
    deleted = (
        db.query(Block)
        .filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("User %s unblocked %s", blocker_id, blocked_id)


def list_blocked(db: Session, blocker_id: UUID) -> List[User]:
    return (
        db.query(User)
        .join(Block, Block.blocked_id == User.id)
        .filter(Block.blocker_id == blocker_id)
        .all()
    )


# ─── Sending ──────────────────────────────────────────────────────────────────

def send_message(
    db: Session,
    sender: User,
    recipient: Union[str, UUID, User],
    text: str,
    property_id: Optional[UUID] = None,
) -> Message:
    target = recipient if isinstance(recipient, User) else resolve_recipient(db, recipient)
    if target is None:
        logger.info("Recipient not found: %s", recipient)
        raise NotFound("Recipient not found")

    text = (text or "").strip()
    if not text:
        raise MarketplaceError("Message text must not be empty")

    if property_id is not None and db.get(Property, property_id) is None:
        raise NotFound("Property not found")

    blocked = is_blocked(db, target.id, sender.id)
    if blocked:
        logger.info("Message silently blocked: %s is blocked by %s", sender.email, target.email)

    message = Message(
        sender_id=sender.id,
        recipient_id=target.id,
        property_id=property_id,
        text=text,
        is_blocked=blocked,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


# ─── Reading ──────────────────────────────────────────────────────────────────

def get_conversation(db: Session, user_id: UUID, other_user_id: UUID) -> List[Message]:
    """Both directions, oldest first, as seen by ``user_id``."""
    return (
        db.query(Message)
        .filter(_between(user_id, other_user_id), _visible_to(user_id))
        .order_by(Message.created_at.asc())
        .all()
    )


def get_inbox(db: Session, user_id: UUID) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.recipient_id == user_id, Message.is_blocked.is_(False))
        .order_by(Message.created_at.desc())
        .all()
    )


def get_sent(db: Session, user_id: UUID) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.sender_id == user_id)
        .order_by(Message.created_at.desc())
        .all()
    )


def get_messages_by_property(db: Session, property_id: UUID) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.property_id == property_id)
        .order_by(Message.created_at.asc())
        .all()
    )


def get_conversations_by_property(db: Session, user_id: UUID) -> Dict[Optional[UUID], List[Message]]:
    """The user's visible messages grouped by property (None for direct chats)."""
    grouped: Dict[Optional[UUID], List[Message]] = {}
    messages = (
        db.query(Message)
        .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id), _visible_to(user_id))
        .order_by(Message.created_at.asc())
        .all()
    )
    for m in messages:
        grouped.setdefault(m.property_id, []).append(m)
    return grouped


def get_chat_partners(db: Session, user_id: UUID) -> List[User]:
    """Users this user has a visible chat history with, most recent first."""
    messages = (
        db.query(Message)
        .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id), _visible_to(user_id))
        .order_by(Message.created_at.desc())
        .all()
    )
    partner_ids: List[UUID] = []
    for m in messages:
        other = m.recipient_id if m.sender_id == user_id else m.sender_id
        if other not in partner_ids:
            partner_ids.append(other)

    partners = []
    for pid in partner_ids:
        user = auth_service.get_user_by_id(db, pid)
        if user is not None:
            partners.append(user)
    return partners


def has_user_contacted(db: Session, sender_id: UUID, recipient_id: UUID) -> bool:
    """True if ``sender_id`` ever sent a message to ``recipient_id``. One direction only."""
    return db.query(
        db.query(Message)
        .filter(Message.sender_id == sender_id, Message.recipient_id == recipient_id)
        .exists()
    ).scalar()


def search_messages(db: Session, user_id: UUID, query: str) -> List[Message]:
    term = f"%{(query or '').strip().lower()}%"
    return (
        db.query(Message)
        .filter(
            or_(Message.sender_id == user_id, Message.recipient_id == user_id),
            _visible_to(user_id),
            func.lower(Message.text).like(term),
        )
        .order_by(Message.created_at.desc())
        .all()
    )


# ─── Read state / housekeeping ────────────────────────────────────────────────

def mark_as_read(db: Session, user_id: UUID, message_id: UUID) -> Message:
    message = db.get(Message, message_id)
    if message is None or message.recipient_id != user_id or message.is_blocked:
        raise NotFound("Message not found")
    message.is_read = True
    db.commit()
    db.refresh(message)
    return message


def mark_conversation_as_read(db: Session, user_id: UUID, other_user_id: UUID) -> int:
    updated = (
        db.query(Message)
        .filter(
            Message.recipient_id == user_id,
            Message.sender_id == other_user_id,
            Message.is_read.is_(False),
        )
        .update({Message.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def get_unread_count(db: Session, user_id: UUID) -> int:
    return (
        db.query(func.count(Message.id))
        .filter(
            Message.recipient_id == user_id,
            Message.is_read.is_(False),
            Message.is_blocked.is_(False),
        )
        .scalar()
    )


def delete_conversation(db: Session, user_id: UUID, other_user_id: UUID) -> int:
    deleted = (
        db.query(Message)
        .filter(_between(user_id, other_user_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Conversation between %s and %s deleted (%d messages)", user_id, other_user_id, deleted)
    return deleted
