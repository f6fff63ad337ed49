from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from database import Base
from users.model import generate_id, utcnow


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    project_type = Column(String(100), nullable=False)
    budget = Column(String(100), nullable=False)
    timeline = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    # Assigned at insert time, microsecond resolution keeps listings ordered
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
