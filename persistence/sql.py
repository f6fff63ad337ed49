import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from contact import model as contact_model
from contact.schema import Contact, ContactCreate
from newsletter import model as newsletter_model
from newsletter.schema import NewsletterSubscription
from .base import PersistenceAdapter
from .errors import AlreadySubscribed, PersistenceError, PersistenceUnavailable

logger = logging.getLogger(__name__)

UNCONFIGURED_MESSAGE = "Database not configured. Please set DATABASE_URL."


class SQLAdapter(PersistenceAdapter):
    """Persistence over a relational database through SQLAlchemy sessions."""

    name = "sql"

    def __init__(self, session_factory: Optional[sessionmaker]):
        self._session_factory = session_factory

    @property
    def configured(self) -> bool:
        return self._session_factory is not None

    @property
    def engine(self):
        if self._session_factory is None:
            return None
        return self._session_factory.kw.get("bind")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise PersistenceUnavailable(UNCONFIGURED_MESSAGE)
        db = self._session_factory()
        try:
            # Check out a connection up front so an unreachable database
            # is reported before any statement runs
            try:
                db.connection()
            except DBAPIError as e:
                raise PersistenceUnavailable(f"Cannot connect to database: {e}") from e
            yield db
        finally:
            db.close()

    @staticmethod
    def _failed(action: str, e: SQLAlchemyError) -> PersistenceError:
        if isinstance(e, DBAPIError) and e.connection_invalidated:
            return PersistenceUnavailable(f"Lost database connection during {action}: {e}")
        return PersistenceError(f"Failed to {action}: {e}")

    def create_contact(self, data: ContactCreate) -> Contact:
        with self._session() as db:
            new_contact = contact_model.Contact(**data.model_dump())
            try:
                db.add(new_contact)
                db.commit()
                db.refresh(new_contact)
            except SQLAlchemyError as e:
                db.rollback()
                raise self._failed("insert contact", e) from e
            return Contact.model_validate(new_contact)

    def list_contacts(self) -> List[Contact]:
        with self._session() as db:
            try:
                rows = db.query(contact_model.Contact)\
                    .order_by(desc(contact_model.Contact.created_at))\
                    .all()
            except SQLAlchemyError as e:
                raise self._failed("list contacts", e) from e
            return [Contact.model_validate(row) for row in rows]

    def find_subscription_by_email(self, email: str) -> Optional[NewsletterSubscription]:
        with self._session() as db:
            try:
                row = db.query(newsletter_model.NewsletterSubscription)\
                    .filter(newsletter_model.NewsletterSubscription.email == email)\
                    .first()
            except SQLAlchemyError as e:
                raise self._failed("look up subscription", e) from e
            if row is None:
                return None
            return NewsletterSubscription.model_validate(row)

    def create_subscription(self, email: str) -> NewsletterSubscription:
        with self._session() as db:
            new_subscription = newsletter_model.NewsletterSubscription(email=email)
            try:
                db.add(new_subscription)
                db.commit()
                db.refresh(new_subscription)
            except IntegrityError as e:
                # Another request inserted the same email after our lookup
                db.rollback()
                logger.info(f"Subscription insert for {email} hit the unique constraint")
                raise AlreadySubscribed(email) from e
            except SQLAlchemyError as e:
                db.rollback()
                raise self._failed("insert subscription", e) from e
            return NewsletterSubscription.model_validate(new_subscription)

    def list_subscriptions(self) -> List[NewsletterSubscription]:
        with self._session() as db:
            try:
                rows = db.query(newsletter_model.NewsletterSubscription)\
                    .order_by(desc(newsletter_model.NewsletterSubscription.subscribed_at))\
                    .all()
            except SQLAlchemyError as e:
                raise self._failed("list subscriptions", e) from e
            return [NewsletterSubscription.model_validate(row) for row in rows]

    def close(self) -> None:
        engine = self.engine
        if engine is not None:
            engine.dispose()
