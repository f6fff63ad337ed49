import pytest

from contact.schema import ContactCreate
from newsletter.schema import SubscriptionCreate
from validation import MALFORMED_BODY, ValidationError, validate


def _fields(exc: ValidationError):
    return {error["field"] for error in exc.errors}


def _messages(exc: ValidationError):
    return {error["field"]: error["message"] for error in exc.errors}


def test_valid_contact_payload_returns_model(contact_payload) -> None:
    contact = validate(ContactCreate, contact_payload())

    assert contact.name == "Ada Lovelace"
    assert contact.project_type == "Web application"
    assert contact.company == "Analytical Engines Ltd"


def test_optional_contact_fields_may_be_omitted(contact_payload) -> None:
    payload = contact_payload()
    del payload["company"]
    del payload["phone"]

    contact = validate(ContactCreate, payload)

    assert contact.company is None
    assert contact.phone is None


def test_project_type_accepts_camel_case_input(contact_payload) -> None:
    payload = contact_payload()
    payload["projectType"] = payload.pop("project_type")

    contact = validate(ContactCreate, payload)

    assert contact.project_type == "Web application"


@pytest.mark.parametrize(
    "field", ["name", "email", "project_type", "budget", "timeline", "message"]
)
def test_missing_required_contact_field_is_reported(contact_payload, field: str) -> None:
    payload = contact_payload()
    del payload[field]

    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, payload)

    assert exc_info.value.message == "Validation error"
    assert field in _fields(exc_info.value)


@pytest.mark.parametrize(
    "field,message",
    [
        ("name", "Name is required"),
        ("project_type", "Project type is required"),
        ("budget", "Budget is required"),
        ("timeline", "Timeline is required"),
        ("message", "Message is required"),
    ],
)
def test_blank_required_field_reports_its_reason(contact_payload, field: str, message: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, contact_payload(**{field: "   "}))

    assert _messages(exc_info.value) == {field: message}


def test_blank_camel_case_project_type_reports_its_reason(contact_payload) -> None:
    payload = contact_payload()
    del payload["project_type"]
    payload["projectType"] = ""

    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, payload)

    assert _messages(exc_info.value) == {"projectType": "Project type is required"}


def test_too_long_value_keeps_the_limit_in_its_reason(contact_payload) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, contact_payload(phone="0" * 51))

    assert "50" in _messages(exc_info.value)["phone"]


def test_contact_rejects_invalid_email(contact_payload) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, contact_payload(email="not-an-email"))

    assert _messages(exc_info.value) == {"email": "Invalid email address"}


def test_every_error_has_field_and_message() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(ContactCreate, {})

    assert len(exc_info.value.errors) == 6
    for error in exc_info.value.errors:
        assert set(error) == {"field", "message"}
        assert error["message"]


@pytest.mark.parametrize("email", ["", "plainaddress", "@example.com", "user@", 42])
def test_newsletter_rejects_invalid_email(email) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(SubscriptionCreate, {"email": email})

    assert exc_info.value.message == "Invalid email address"
    assert _messages(exc_info.value) == {"email": "Invalid email address"}


def test_newsletter_email_is_normalized() -> None:
    subscription = validate(SubscriptionCreate, {"email": "  Reader@Example.COM "})

    assert subscription.email == "reader@example.com"


@pytest.mark.parametrize("payload", [None, [], "email@example.com"])
def test_non_object_payload_is_rejected(payload) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(SubscriptionCreate, payload)

    assert exc_info.value.errors[0]["field"] == "body"


def test_malformed_body_uses_schema_message() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate(SubscriptionCreate, MALFORMED_BODY)

    assert exc_info.value.message == "Invalid email address"
    assert _messages(exc_info.value) == {"body": "Request body is not valid JSON"}
