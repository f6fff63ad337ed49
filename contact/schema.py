from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import ClassVar, Dict, Optional
from datetime import datetime


# Contact Form Schemas
class ContactCreate(BaseModel):
    __failure_message__: ClassVar[str] = "Validation error"
    __field_messages__: ClassVar[Dict[str, str]] = {
        "name": "Name is required",
        "email": "Invalid email address",
        "project_type": "Project type is required",
        "projectType": "Project type is required",
        "budget": "Budget is required",
        "timeline": "Timeline is required",
        "message": "Message is required",
    }

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    company: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    project_type: str = Field(
        ...,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("project_type", "projectType"),
    )
    budget: str = Field(..., min_length=1, max_length=100)
    timeline: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class Contact(BaseModel):
    id: str
    name: str
    email: str
    company: Optional[str] = None
    phone: Optional[str] = None
    project_type: str
    budget: str
    timeline: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class ContactSubmitted(BaseModel):
    success: bool = True
    message: str
    id: str
