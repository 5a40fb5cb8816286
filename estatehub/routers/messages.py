from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from estatehub.core.database import get_db
from estatehub.core.exceptions import NotFound
from estatehub.models.user import User
from estatehub.schemas.message import MessageCreate, MessageResponse, UnreadCountResponse
from estatehub.schemas.user import PublicUserResponse
from estatehub.services import messaging
from estatehub.api.deps import get_current_active_user

router = APIRouter(prefix="/messages", tags=["Messages"])


# ─── Sending / reading ────────────────────────────────────────────────────────

@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Send a message by recipient email or id.
    The response looks the same whether or not the recipient has blocked you.
    """
    return messaging.send_message(
        db, current_user, payload.recipient, payload.text, payload.property_id
    )


@router.get("/inbox", response_model=List[MessageResponse])
async def inbox(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.get_inbox(db, current_user.id)


@router.get("/sent", response_model=List[MessageResponse])
async def sent(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.get_sent(db, current_user.id)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return UnreadCountResponse(unread=messaging.get_unread_count(db, current_user.id))


@router.get("/partners", response_model=List[PublicUserResponse])
async def chat_partners(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.get_chat_partners(db, current_user.id)


@router.get("/search", response_model=List[MessageResponse])
async def search_messages(
    q: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.search_messages(db, current_user.id, q)


@router.get("/property/{property_id}", response_model=List[MessageResponse])
async def property_messages(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Messages about a listing that involve the current user."""
    grouped = messaging.get_conversations_by_property(db, current_user.id)
    return grouped.get(property_id, [])


@router.post("/{message_id}/read", response_model=MessageResponse)
async def mark_read(
    message_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.mark_as_read(db, current_user.id, message_id)


# ─── Blocking ─────────────────────────────────────────────────────────────────

@router.get("/blocked", response_model=List[PublicUserResponse])
async def blocked_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return messaging.list_blocked(db, current_user.id)


@router.post("/block/{user_id}", response_model=dict)
async def block(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    messaging.block_user(db, current_user.id, user_id)
    return {"message": "User blocked"}


@router.delete("/block/{user_id}", response_model=dict)
async def unblock(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    messaging.unblock_user(db, current_user.id, user_id)
    return {"message": "User unblocked"}


# ─── Conversations ────────────────────────────────────────────────────────────

@router.get("/conversation/{partner_id}", response_model=List[MessageResponse])
async def conversation(
    partner_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Chat history with one partner, oldest first."""
    return messaging.get_conversation(db, current_user.id, partner_id)


@router.post("/conversation/{partner_id}/read", response_model=dict)
async def mark_conversation_read(
    partner_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    updated = messaging.mark_conversation_as_read(db, current_user.id, partner_id)
    return {"updated": updated}


@router.delete("/conversation/{partner_id}", response_model=dict)
async def delete_conversation(
    partner_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    deleted = messaging.delete_conversation(db, current_user.id, partner_id)
    if not deleted:
        raise NotFound("Conversation not found")
    return {"deleted": deleted}
