from sqlalchemy import Column, Boolean, Text, ForeignKey, UniqueConstraint, Uuid
from estatehub.models.base import BaseModel

class Message(BaseModel):
    __tablename__ = "messages"

    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    property_id = Column(Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    # Frozen at send time: recipient had blocked the sender
    is_blocked = Column(Boolean, default=False, nullable=False)

class Block(BaseModel):
    __tablename__ = "blocks"
    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="uq_block_pair"),
    )

    blocker_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    blocked_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
