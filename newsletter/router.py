from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, List
import logging
from persistence.base import PersistenceAdapter
from persistence.deps import get_persistence
from persistence.errors import AlreadySubscribed, PersistenceError, PersistenceUnavailable
from validation import body_schema, json_body, validate
from . import schema

logger = logging.getLogger(__name__)

newsletter_router = APIRouter(
    prefix="/newsletter",
    tags=["newsletter"]
)

ALREADY_SUBSCRIBED = "You're already subscribed to our newsletter!"
SUBSCRIBED = "Successfully subscribed to newsletter!"


# Newsletter subscription
@newsletter_router.post(
    "",
    response_model=schema.SubscriptionResult,
    response_model_exclude_none=True,
    openapi_extra=body_schema(schema.SubscriptionCreate),
)
def create_subscription(payload: Any = Depends(json_body), db: PersistenceAdapter = Depends(get_persistence)):
    subscription = validate(schema.SubscriptionCreate, payload)

    try:
        # Check if email already exists
        existing = db.find_subscription_by_email(subscription.email)
        if existing:
            return {"success": True, "message": ALREADY_SUBSCRIBED}

        new_subscription = db.create_subscription(subscription.email)
    except AlreadySubscribed:
        # Lost the race against a concurrent request for the same email
        return {"success": True, "message": ALREADY_SUBSCRIBED}
    except PersistenceUnavailable:
        raise
    except PersistenceError as e:
        logger.error(f"Newsletter subscription error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to subscribe to newsletter"
        )

    return {"success": True, "message": SUBSCRIBED, "id": new_subscription.id}


# Get all newsletter subscriptions (admin endpoint)
@newsletter_router.get("", response_model=List[schema.NewsletterSubscription])
def read_subscriptions(db: PersistenceAdapter = Depends(get_persistence)):
    try:
        return db.list_subscriptions()
    except PersistenceUnavailable:
        raise
    except PersistenceError as e:
        logger.error(f"Get newsletter subscriptions error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch newsletter subscriptions"
        )
