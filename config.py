import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# API configuration
API_PREFIX = "/api"

SUPPORTED_BACKENDS = ("sql", "rest")


def _database_url_from_env() -> Optional[str]:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Fall back to the individual PostgreSQL settings when a server is given
    server = os.getenv("POSTGRES_SERVER")
    if not server:
        return None
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "website_db")
    return f"postgresql://{user}:{password}@{server}:{port}/{db}"


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    app_env: str = "development"
    log_level: str = "INFO"
    persistence_backend: str = "sql"
    database_url: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    request_timeout: float = 10.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 5000

    @property
    def debug(self) -> bool:
        return self.app_env == "development"


def load_settings() -> Settings:
    """Read settings from the environment at call time."""
    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        persistence_backend=os.getenv("PERSISTENCE_BACKEND", "sql").strip().lower(),
        database_url=_database_url_from_env(),
        supabase_url=os.getenv("SUPABASE_URL") or os.getenv("VITE_SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_ANON_KEY") or os.getenv("VITE_SUPABASE_ANON_KEY"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
    )
