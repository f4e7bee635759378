"""
Registration endpoint responses, resolved once at the HTTP boundary.

The server may answer a 422 with {"errors": {field: [msg, ...]}} or with a
plain {"message": "..."}; parse_response turns every shape into one of the
variants below so nothing downstream inspects raw JSON.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_VALIDATION_MESSAGE = "The submitted information is invalid. Please review it and try again."


@dataclass(frozen=True)
class Accepted:
    status_code: int
    data: dict[str, Any] = field(default_factory=dict)
    message: str | None = None


@dataclass(frozen=True)
class FieldErrors:
    errors: dict[str, str]
    message: str | None = None


@dataclass(frozen=True)
class PlainMessage:
    message: str


@dataclass(frozen=True)
class HttpFailure:
    status_code: int
    message: str | None = None


RegistrationResponse = Accepted | FieldErrors | PlainMessage | HttpFailure


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _first_messages(errors: Any) -> dict[str, str]:
    """{field: [msg, ...] | msg} → {field: first msg}. Anything else is dropped."""
    if not isinstance(errors, dict):
        return {}
    extracted: dict[str, str] = {}
    for name, value in errors.items():
        if isinstance(value, list):
            value = next((m for m in value if isinstance(m, str) and m), None)
        if isinstance(value, str) and value:
            extracted[str(name)] = value
    return extracted


def parse_response(response: httpx.Response) -> RegistrationResponse:
    status = response.status_code
    body = _body(response)

    if 200 <= status < 300:
        data = body.get("data", body) if isinstance(body, dict) else {}
        return Accepted(
            status_code=status,
            data=data if isinstance(data, dict) else {},
            message=_message(body),
        )

    if status == 422:
        errors = _first_messages(body.get("errors")) if isinstance(body, dict) else {}
        if errors:
            return FieldErrors(errors=errors, message=_message(body))
        return PlainMessage(_message(body) or DEFAULT_VALIDATION_MESSAGE)

    return HttpFailure(status_code=status, message=_message(body))
