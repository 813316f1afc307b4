# patient_manager/utils/validators.py
import json
from typing import Any, Dict, Optional, Sequence, Tuple

from fastapi import HTTPException
from fastapi import status

from patient_manager.models.patient import to_test_string

# (body key, label used in the error message), in the order they are checked
CREATE_PATIENT_FIELDS = (
    ("name", "name"),
    ("age", "age"),
    ("email", "email"),
    ("phone_number", "phone_number"),
    ("house_address", "house_address"),
)
UPDATE_PATIENT_FIELDS = (
    ("name", "name"),
    ("age", "age"),
    ("email", "email"),
    ("phone_number", "phone number"),
    ("house_address", "house address"),
)
TEST_FIELDS = ("name", "value")


def bad_request(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": "BadRequest", "message": message}
    )


def as_body(body: Any) -> Dict[str, Any]:
    """Treat a missing or non-object body as an empty one"""
    return body if isinstance(body, dict) else {}


def require_fields(body: Dict[str, Any], fields: Sequence[Tuple[str, str]]) -> None:
    """Raise a 400 naming the first absent field. Presence only, null is accepted."""
    for key, label in fields:
        if key not in body:
            raise bad_request(f"{label} must be supplied")


def require_test_fields(body: Dict[str, Any]) -> None:
    if any(key not in body for key in TEST_FIELDS):
        raise bad_request("name and value must be supplied")


def decode_json_body(raw: bytes) -> Dict[str, Any]:
    """Decode a request body that may be a JSON object or a JSON-encoded string of one.

    Older clients send the update payload double-encoded (a JSON string whose
    content is the object), newer ones send the object itself.
    """
    if not raw:
        return {}
    try:
        body = json.loads(raw)
        if isinstance(body, str):
            body = json.loads(body)
    except ValueError:
        raise bad_request("request body must be valid JSON")
    return as_body(body)


def read_test_fields(body: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return the test name and value as the strings that get stored"""
    require_test_fields(body)
    try:
        return to_test_string(body["name"]), to_test_string(body["value"])
    except ValueError:
        raise bad_request("name and value must be strings or numbers")
