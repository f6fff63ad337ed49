from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, List
import logging
from persistence.base import PersistenceAdapter
from persistence.deps import get_persistence
from persistence.errors import PersistenceError, PersistenceUnavailable
from validation import body_schema, json_body, validate
from . import schema

logger = logging.getLogger(__name__)

contact_router = APIRouter(
    tags=["contact"]
)


# Contact form submission
@contact_router.post(
    "/contact",
    response_model=schema.ContactSubmitted,
    openapi_extra=body_schema(schema.ContactCreate),
)
def submit_contact_form(payload: Any = Depends(json_body), db: PersistenceAdapter = Depends(get_persistence)):
    form_data = validate(schema.ContactCreate, payload)

    try:
        new_submission = db.create_contact(form_data)
    except PersistenceUnavailable:
        raise
    except PersistenceError as e:
        logger.error(f"Contact form error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit contact form"
        )

    logger.info(f"Contact submission {new_submission.id} stored")
    return {
        "success": True,
        "message": "Contact form submitted successfully",
        "id": new_submission.id,
    }


# Get all contacts (admin endpoint)
@contact_router.get("/contacts", response_model=List[schema.Contact])
def read_contacts(db: PersistenceAdapter = Depends(get_persistence)):
    try:
        return db.list_contacts()
    except PersistenceUnavailable:
        raise
    except PersistenceError as e:
        logger.error(f"Get contacts error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch contacts"
        )
