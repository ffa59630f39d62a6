"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from always_connected.infrastructure.database import Base
from always_connected.utils import now_naive_utc


class UserModel(Base):
    """Database representation of one of the two participants."""

    __tablename__ = "user"

    user_id = Column(String(20), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=now_naive_utc)
    push_subscriptions = relationship(
        "PushSubscriptionModel",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PushSubscriptionModel.id",
    )
