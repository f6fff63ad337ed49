from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from main import create_app
from config import Settings
from persistence.errors import PersistenceError
from persistence.sql import SQLAdapter



def test_submit_contact_returns_id(client: TestClient, contact_payload) -> None:
    response = client.post("/api/contact", json=contact_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Contact form submitted successfully"
    assert body["id"]


def test_submitted_contact_is_listed(client: TestClient, contact_payload) -> None:
    submitted = client.post("/api/contact", json=contact_payload()).json()

    response = client.get("/api/contacts")

    assert response.status_code == 200
    listing = response.json()
    assert len(listing) == 1
    record = listing[0]
    assert record["id"] == submitted["id"]
    for field, value in contact_payload().items():
        assert record[field] == value
    assert record["created_at"]


@pytest.mark.parametrize(
    "field", ["name", "email", "project_type", "budget", "timeline", "message"]
)
def test_missing_field_returns_400_naming_it(client: TestClient, field: str, contact_payload) -> None:
    payload = contact_payload()
    del payload[field]

    response = client.post("/api/contact", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert field in {error["field"] for error in body["errors"]}
    assert client.get("/api/contacts").json() == []


def test_malformed_json_returns_400(client: TestClient) -> None:
    response = client.post(
        "/api/contact",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert body["errors"] == [{"field": "body", "message": "Request body is not valid JSON"}]


def test_blank_name_reports_required_message(client: TestClient, contact_payload) -> None:
    response = client.post("/api/contact", json=contact_payload(name=""))

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "name", "message": "Name is required"}]


def test_contacts_are_listed_newest_first(client: TestClient, contact_payload) -> None:
    ids = [
        client.post("/api/contact", json=contact_payload(name=f"Client {i}")).json()["id"]
        for i in range(3)
    ]

    listing = client.get("/api/contacts").json()

    assert [record["id"] for record in listing] == list(reversed(ids))


class FailingAdapter(SQLAdapter):
    def __init__(self):
        super().__init__(None)

    def create_contact(self, data):
        raise PersistenceError("insert failed: relation contacts does not exist")

    def list_contacts(self):
        raise PersistenceError("select failed: connection reset")


def test_persistence_failure_returns_generic_500(contact_payload) -> None:
    app = create_app(Settings(), adapter=FailingAdapter())

    with TestClient(app) as client:
        created = client.post("/api/contact", json=contact_payload())
        listed = client.get("/api/contacts")

    assert created.status_code == 500
    assert created.json() == {"success": False, "message": "Failed to submit contact form"}
    assert listed.status_code == 500
    assert listed.json() == {"success": False, "message": "Failed to fetch contacts"}
