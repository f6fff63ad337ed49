from fastapi import Request

from .base import PersistenceAdapter


def get_persistence(request: Request) -> PersistenceAdapter:
    """FastAPI dependency returning the adapter built by ``create_app``."""
    return request.app.state.persistence
