from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from database import Base
from users.model import generate_id, utcnow


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False)
    subscribed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
