from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
from typing import Optional
import uvicorn
import logging
from config import API_PREFIX, Settings, load_settings
from database import create_tables
from sqlalchemy.exc import SQLAlchemyError
from persistence.base import PersistenceAdapter
from persistence.errors import PersistenceUnavailable
from persistence.factory import build_adapter
from persistence.sql import SQLAdapter
from validation import ValidationError

# Import routers
from contact.router import contact_router
from newsletter.router import newsletter_router

settings = load_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Database not configured or unreachable. Please try again later."


def _failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra}
    )


def create_app(settings: Optional[Settings] = None, adapter: Optional[PersistenceAdapter] = None) -> FastAPI:
    """Build the API with its persistence adapter.

    The adapter is chosen from ``settings`` unless one is passed in, and is
    shared by every request through ``app.state.persistence``.
    """
    settings = settings or load_settings()
    owns_adapter = adapter is None
    if adapter is None:
        adapter = build_adapter(settings)

    app = FastAPI(
        title="Contact & Newsletter API",
        description="Contact form submissions and newsletter subscriptions",
        version="1.0.0",
        openapi_url=f"{API_PREFIX}/openapi.json",
        docs_url=f"{API_PREFIX}/docs",
        redoc_url=f"{API_PREFIX}/redoc",
        debug=settings.debug
    )
    app.state.settings = settings
    app.state.persistence = adapter

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Global exception: {exc}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "client": request.client.host if request.client else "unknown",
            }
        )
        return _failure(500, "Internal server error")

    # Payload failed its schema
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors}")
        return _failure(400, exc.message, errors=exc.errors)

    @app.exception_handler(PersistenceUnavailable)
    async def unavailable_handler(request: Request, exc: PersistenceUnavailable):
        logger.warning(f"Persistence unavailable on {request.url.path}: {exc}")
        return _failure(503, UNAVAILABLE_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _failure(exc.status_code, str(exc.detail))

    # Data routes
    app.include_router(contact_router, prefix=f"{API_PREFIX}")
    app.include_router(newsletter_router, prefix=f"{API_PREFIX}")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the Contact & Newsletter API",
            "documentation": f"{API_PREFIX}/docs",
            "redoc": f"{API_PREFIX}/redoc"
        }

    # Health check endpoint
    @app.get("/health")
    @app.get(f"{API_PREFIX}/health")
    async def health_check():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    # Event handler to create database tables at startup
    @app.on_event("startup")
    async def startup_event():
        if isinstance(adapter, SQLAdapter) and adapter.engine is not None:
            try:
                create_tables(adapter.engine)
                logger.info("Database tables created")
            except SQLAlchemyError as e:
                # Keep serving, data routes answer 503 until the database is back
                logger.error(f"Database initialization failed: {e}")

    @app.on_event("shutdown")
    async def shutdown_event():
        if owns_adapter:
            adapter.close()

    return app


app = create_app(settings)

# Run the application
if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
