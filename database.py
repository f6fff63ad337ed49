from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

# Configure logging
logger = logging.getLogger(__name__)

Base = declarative_base()


def masked_url(database_url: str) -> str:
    """Render a database URL with the password hidden, for logs."""
    return make_url(database_url).render_as_string(hide_password=True)


# Create SQLAlchemy engine for the given URL
def build_engine(database_url: str) -> Engine:
    logger.info(f"Database URL is {masked_url(database_url)}")
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Requests are served from a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Function to create tables
def create_tables(engine: Engine):
    # Register every model on the metadata before creating tables
    import users.model  # noqa: F401
    import contact.model  # noqa: F401
    import newsletter.model  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise
