from abc import ABC, abstractmethod
from typing import List, Optional

from contact.schema import Contact, ContactCreate
from newsletter.schema import NewsletterSubscription


class PersistenceAdapter(ABC):
    """Storage contract shared by every backend.

    Listings are ordered newest first. Implementations raise
    ``PersistenceUnavailable`` when their backend is not configured and
    ``PersistenceError`` when a call fails.
    """

    name = "abstract"

    @abstractmethod
    def create_contact(self, data: ContactCreate) -> Contact:
        ...

    @abstractmethod
    def list_contacts(self) -> List[Contact]:
        ...

    @abstractmethod
    def find_subscription_by_email(self, email: str) -> Optional[NewsletterSubscription]:
        ...

    @abstractmethod
    def create_subscription(self, email: str) -> NewsletterSubscription:
        """Insert a subscription; raises ``AlreadySubscribed`` on a duplicate email."""

    @abstractmethod
    def list_subscriptions(self) -> List[NewsletterSubscription]:
        ...

    @property
    @abstractmethod
    def configured(self) -> bool:
        ...

    def close(self) -> None:
        """Release backend resources."""
