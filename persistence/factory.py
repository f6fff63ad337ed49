import logging

from config import SUPPORTED_BACKENDS, Settings
from database import build_engine, build_session_factory
from .base import PersistenceAdapter
from .rest import RestAdapter
from .sql import SQLAdapter

logger = logging.getLogger(__name__)


def build_adapter(settings: Settings) -> PersistenceAdapter:
    """Create the persistence adapter selected by ``PERSISTENCE_BACKEND``."""
    backend = settings.persistence_backend
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unknown persistence backend '{backend}', expected one of: {', '.join(SUPPORTED_BACKENDS)}"
        )

    if backend == "rest":
        adapter = RestAdapter(
            settings.supabase_url,
            settings.supabase_key,
            timeout=settings.request_timeout,
        )
    elif settings.database_url:
        engine = build_engine(settings.database_url)
        adapter = SQLAdapter(build_session_factory(engine))
    else:
        logger.warning("DATABASE_URL is not set, data routes will answer 503")
        adapter = SQLAdapter(None)

    logger.info(f"Using {adapter.name} persistence backend (configured: {adapter.configured})")
    return adapter
