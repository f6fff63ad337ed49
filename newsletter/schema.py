from pydantic import BaseModel, EmailStr, field_validator
from typing import ClassVar, Dict, Optional
from datetime import datetime


# Newsletter subscription schemas
class SubscriptionCreate(BaseModel):
    __failure_message__: ClassVar[str] = "Invalid email address"
    __field_messages__: ClassVar[Dict[str, str]] = {"email": "Invalid email address"}

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        # Uniqueness is case-insensitive
        if isinstance(v, str):
            return v.strip().lower()
        return v


class NewsletterSubscription(BaseModel):
    id: str
    email: str
    subscribed_at: datetime

    class Config:
        from_attributes = True


class SubscriptionResult(BaseModel):
    success: bool = True
    message: str
    id: Optional[str] = None
