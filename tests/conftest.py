from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import build_engine, build_session_factory, create_tables
from main import create_app
from persistence.sql import SQLAdapter


def _contact_payload(**overrides) -> Dict[str, str]:
    payload = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "company": "Analytical Engines Ltd",
        "phone": "+44 20 7946 0000",
        "project_type": "Web application",
        "budget": "$10k - $25k",
        "timeline": "3 months",
        "message": "We would like a quote for a new customer portal.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def contact_payload() -> Callable[..., Dict[str, str]]:
    """Build a valid contact submission, overriding any field by keyword."""
    return _contact_payload


@pytest.fixture()
def sql_adapter(tmp_path: Path) -> Iterator[SQLAdapter]:
    engine = build_engine(f"sqlite:///{tmp_path / 'api.sqlite3'}")
    create_tables(engine)
    adapter = SQLAdapter(build_session_factory(engine))
    yield adapter
    adapter.close()


@pytest.fixture()
def client(sql_adapter: SQLAdapter) -> Iterator[TestClient]:
    app = create_app(Settings(), adapter=sql_adapter)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def unavailable_client() -> Iterator[TestClient]:
    app = create_app(Settings(database_url=None))
    with TestClient(app) as test_client:
        yield test_client
