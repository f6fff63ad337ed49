import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from contact.schema import Contact, ContactCreate
from newsletter.schema import NewsletterSubscription
from .base import PersistenceAdapter
from .errors import AlreadySubscribed, PersistenceError, PersistenceUnavailable

logger = logging.getLogger(__name__)

UNCONFIGURED_MESSAGE = "Database not configured. Please set SUPABASE_URL and SUPABASE_ANON_KEY."

# PostgreSQL error code for unique_violation
UNIQUE_VIOLATION = "23505"

CONTACTS_TABLE = "contacts"
SUBSCRIPTIONS_TABLE = "newsletter_subscriptions"


class RestAdapter(PersistenceAdapter):
    """Persistence through a hosted PostgREST endpoint (Supabase style)."""

    name = "rest"

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client: Optional[httpx.Client] = None
        if not base_url or not api_key:
            missing = []
            if not base_url: missing.append("SUPABASE_URL")
            if not api_key: missing.append("SUPABASE_ANON_KEY")
            logger.warning(f"REST backend disabled, missing: {', '.join(missing)}")
            return

        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _request(self, method: str, table: str, **kwargs) -> httpx.Response:
        if self._client is None:
            raise PersistenceUnavailable(UNCONFIGURED_MESSAGE)
        try:
            return self._client.request(method, f"/{table}", **kwargs)
        except httpx.ConnectError as e:
            raise PersistenceUnavailable(f"Cannot reach REST backend: {e}") from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"{method} /{table} failed: {e}") from e

    @staticmethod
    def _error_code(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("code")
        return None

    @staticmethod
    def _rows(response: httpx.Response, action: str) -> List[Dict[str, Any]]:
        if response.is_error:
            raise PersistenceError(f"{action} returned {response.status_code}: {response.text}")
        try:
            body = response.json()
        except ValueError as e:
            raise PersistenceError(f"{action} returned a non-JSON body") from e
        if not isinstance(body, list):
            raise PersistenceError(f"{action} returned {type(body).__name__}, expected a list")
        return body

    @staticmethod
    def _single(rows: List[Dict[str, Any]], action: str) -> Dict[str, Any]:
        if not rows:
            raise PersistenceError(f"{action} returned no rows")
        return rows[0]

    def _parse(self, schema, row: Dict[str, Any], action: str):
        try:
            return schema.model_validate(row)
        except PydanticValidationError as e:
            raise PersistenceError(f"{action} returned a malformed row: {e}") from e

    def create_contact(self, data: ContactCreate) -> Contact:
        action = "Insert contact"
        response = self._request(
            "POST",
            CONTACTS_TABLE,
            json=[data.model_dump()],
            headers={"Prefer": "return=representation"},
        )
        row = self._single(self._rows(response, action), action)
        return self._parse(Contact, row, action)

    def list_contacts(self) -> List[Contact]:
        action = "List contacts"
        response = self._request(
            "GET",
            CONTACTS_TABLE,
            params={"select": "*", "order": "created_at.desc"},
        )
        return [self._parse(Contact, row, action) for row in self._rows(response, action)]

    def find_subscription_by_email(self, email: str) -> Optional[NewsletterSubscription]:
        action = "Look up subscription"
        response = self._request(
            "GET",
            SUBSCRIPTIONS_TABLE,
            params={"select": "*", "email": f"eq.{email}", "limit": "1"},
        )
        rows = self._rows(response, action)
        if not rows:
            return None
        return self._parse(NewsletterSubscription, rows[0], action)

    def create_subscription(self, email: str) -> NewsletterSubscription:
        action = "Insert subscription"
        response = self._request(
            "POST",
            SUBSCRIPTIONS_TABLE,
            json=[{"email": email}],
            headers={"Prefer": "return=representation"},
        )
        if response.status_code == 409 or self._error_code(response) == UNIQUE_VIOLATION:
            logger.info(f"Subscription insert for {email} hit the unique constraint")
            raise AlreadySubscribed(email)
        row = self._single(self._rows(response, action), action)
        return self._parse(NewsletterSubscription, row, action)

    def list_subscriptions(self) -> List[NewsletterSubscription]:
        action = "List subscriptions"
        response = self._request(
            "GET",
            SUBSCRIPTIONS_TABLE,
            params={"select": "*", "order": "subscribed_at.desc"},
        )
        return [self._parse(NewsletterSubscription, row, action) for row in self._rows(response, action)]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
