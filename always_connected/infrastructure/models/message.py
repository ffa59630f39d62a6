"""SQLAlchemy model for persisted messages."""

from sqlalchemy import Column, DateTime, Index, String, Text

from always_connected.infrastructure.database import Base


class MessageModel(Base):
    """Database representation of an exchanged message.

    Rows are only ever inserted.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_pair_created_at", "sender", "recipient", "created_at"),
    )

    id = Column(String(32), primary_key=True)
    sender = Column(String(20), nullable=False)
    recipient = Column(String(20), nullable=False)
    kind = Column(String(20), nullable=False)
    original_text = Column(Text, nullable=True)
    enrichment_note = Column(Text, nullable=True)
    custom_text = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, index=True)


__all__ = ["MessageModel"]
