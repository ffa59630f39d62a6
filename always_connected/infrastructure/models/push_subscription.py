"""SQLAlchemy model for browser push subscriptions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from always_connected.infrastructure.database import Base
from always_connected.utils import now_naive_utc


class PushSubscriptionModel(Base):
    """Push service endpoint owned by a single user."""

    __tablename__ = "push_subscription"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(20), ForeignKey("user.user_id"), nullable=False, index=True)
    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)
    expiration_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_naive_utc)

    user = relationship("UserModel", back_populates="push_subscriptions")


__all__ = ["PushSubscriptionModel"]
