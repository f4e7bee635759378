"""Tests for WizardSession submission against a mocked registration endpoint."""

import json

import httpx
import pytest

from vendor_bot.wizard.client import RegistrationClient
from vendor_bot.wizard.fields import STEP_REVIEW
from vendor_bot.wizard.responses import (
    DEFAULT_VALIDATION_MESSAGE,
    Accepted,
    FieldErrors,
    HttpFailure,
    PlainMessage,
    parse_response,
)
from vendor_bot.wizard.session import WizardSession
from vendor_bot.wizard.state import INCOMPLETE_STEPS_BANNER, SubmissionStatus, WizardState
from vendor_bot.wizard.storage import MemoryFormStorage
from vendor_bot.wizard.submission import (
    CORRECT_ERRORS_BANNER,
    GENERIC_FAILURE_MESSAGE,
    NETWORK_MESSAGE,
    STATUS_MESSAGES,
    TIMEOUT_MESSAGE,
    UNEXPECTED_MESSAGE,
)

SUCCESS_BODY = {
    "success": True,
    "message": "Vendor application submitted successfully",
    "data": {
        "application_id": "APP-1700000000000-abc123xyz",
        "name": "Abebe Kebede",
        "email": "abebe@example.com",
        "business_name": "Kebede Electronics",
        "status": "pending_review",
        "submitted_at": "2026-10-19T08:00:00",
        "estimated_review_time": "2-3 business days",
    },
}


class Recorder:
    """MockTransport handler that replays canned answers and keeps the requests."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


def _session(handler, storage=None, state=None) -> WizardSession:
    client = RegistrationClient(
        "http://registration.test",
        transport=httpx.MockTransport(handler),
    )
    return WizardSession(storage or MemoryFormStorage("42"), client, state)


async def _complete(session: WizardSession, values: dict, documents: dict) -> None:
    for name, value in values.items():
        await session.update_field(name, value)
    for name, doc in documents.items():
        await session.update_field(name, doc)
    for _ in range(4):
        assert await session.advance_step()
    assert session.state.current_step == STEP_REVIEW


# ── Scenario: accepted ────────────────────────────────────

@pytest.mark.asyncio
async def test_successful_submission_clears_everything(valid_values, documents):
    storage = MemoryFormStorage("42")
    handler = Recorder(httpx.Response(201, json=SUCCESS_BODY))
    session = _session(handler, storage)
    await _complete(session, valid_values, documents)
    assert storage.data                                    # progress was saved

    state = await session.submit()

    assert state.status == SubmissionStatus.SUBMITTED
    assert state.result["application_id"] == "APP-1700000000000-abc123xyz"
    assert state.values == {}
    assert state.attachments == {}
    assert state.completed_steps == frozenset()
    assert storage.data == {}


@pytest.mark.asyncio
async def test_request_is_multipart_with_documents(valid_values, documents):
    handler = Recorder(httpx.Response(201, json=SUCCESS_BODY))
    session = _session(handler)
    await _complete(session, valid_values, documents)
    await session.submit()

    assert len(handler.requests) == 1
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/vendor-onboarding/"
    assert request.headers["accept"] == "application/json"
    assert request.headers["content-type"].startswith("multipart/form-data")

    body = request.content
    assert b'name="trade_license_doc"; filename="trade_license.pdf"' in body
    assert b'name="id_card_doc"; filename="id_card.jpg"' in body
    assert b'name="password"' in body
    assert b"Kebede Electronics" in body


@pytest.mark.asyncio
async def test_bearer_token_is_sent(valid_values, documents):
    handler = Recorder(httpx.Response(201, json=SUCCESS_BODY))
    client = RegistrationClient(
        "http://registration.test",
        api_token="secret-token",
        transport=httpx.MockTransport(handler),
    )
    session = WizardSession(MemoryFormStorage(), client)
    await _complete(session, valid_values, documents)
    await session.submit()
    assert handler.requests[0].headers["authorization"] == "Bearer secret-token"


# ── Scenario: server-side field errors ────────────────────

@pytest.mark.asyncio
async def test_server_field_errors_map_inline(valid_values, documents):
    values = {**valid_values, "business_email": "invalid"}
    state = WizardState(
        values=values,
        attachments=documents,
        current_step=STEP_REVIEW,
        completed_steps=frozenset({1, 2, 3, 4}),
    )
    handler = Recorder(httpx.Response(422, json={
        "success": False,
        "message": "The given data was invalid.",
        "errors": {"business_email": ["The business email must be a valid email."]},
    }))
    session = _session(handler, state=state)

    state = await session.submit()

    assert len(handler.requests) == 1
    assert state.status == SubmissionStatus.FAILED
    assert state.field_errors == {"business_email": "The business email must be a valid email."}
    assert state.banner == CORRECT_ERRORS_BANNER
    assert state.focus_field == "business_email"
    assert state.current_step == STEP_REVIEW
    assert state.values == values                           # data preserved


@pytest.mark.asyncio
async def test_422_with_message_only(valid_values, documents):
    handler = Recorder(httpx.Response(422, json={"message": "Registration is closed."}))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.status == SubmissionStatus.FAILED
    assert state.banner == "Registration is closed."
    assert state.field_errors == {}


@pytest.mark.asyncio
async def test_422_without_body_uses_default(valid_values, documents):
    handler = Recorder(httpx.Response(422, text="nope"))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.banner == DEFAULT_VALIDATION_MESSAGE


# ── Scenario: transport failures ──────────────────────────

@pytest.mark.asyncio
async def test_network_failure_keeps_data(valid_values, documents):
    storage = MemoryFormStorage("42")
    handler = Recorder(httpx.ConnectError("connection refused"))
    session = _session(handler, storage)
    await _complete(session, valid_values, documents)
    saved = dict(storage.data)

    state = await session.submit()

    assert state.status == SubmissionStatus.FAILED
    assert state.banner == NETWORK_MESSAGE
    assert state.current_step == STEP_REVIEW
    assert state.values["name"] == "Abebe Kebede"
    assert set(state.attachments) == {"trade_license_doc", "id_card_doc"}
    assert storage.data == saved


@pytest.mark.asyncio
async def test_timeout(valid_values, documents):
    handler = Recorder(httpx.ReadTimeout("too slow"))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.status == SubmissionStatus.FAILED
    assert state.banner == TIMEOUT_MESSAGE


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(valid_values, documents):
    handler = Recorder(RuntimeError("bug"))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.status == SubmissionStatus.FAILED
    assert state.banner == UNEXPECTED_MESSAGE


# ── HTTP status mapping ───────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize("status", sorted(STATUS_MESSAGES))
async def test_known_status_messages(status, valid_values, documents):
    handler = Recorder(httpx.Response(status, json={"message": "server text"}))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.status == SubmissionStatus.FAILED
    assert state.banner == STATUS_MESSAGES[status]


@pytest.mark.asyncio
async def test_unknown_status_prefers_server_message(valid_values, documents):
    handler = Recorder(httpx.Response(503, json={"message": "Down for maintenance."}))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.banner == "Down for maintenance."


@pytest.mark.asyncio
async def test_unknown_status_without_message(valid_values, documents):
    handler = Recorder(httpx.Response(400))
    session = _session(handler)
    await _complete(session, valid_values, documents)

    state = await session.submit()
    assert state.banner == GENERIC_FAILURE_MESSAGE


# ── Retry and terminal state ──────────────────────────────

@pytest.mark.asyncio
async def test_retry_after_failure(valid_values, documents):
    handler = Recorder(
        httpx.Response(500),
        httpx.Response(201, json=SUCCESS_BODY),
    )
    session = _session(handler)
    await _complete(session, valid_values, documents)

    first = await session.submit()
    assert first.status == SubmissionStatus.FAILED

    second = await session.submit()
    assert second.status == SubmissionStatus.SUBMITTED
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_submitted_is_terminal(valid_values, documents):
    handler = Recorder(httpx.Response(201, json=SUCCESS_BODY))
    session = _session(handler)
    await _complete(session, valid_values, documents)
    done = await session.submit()

    assert await session.update_field("name", "Someone Else") is done
    assert await session.submit() is done
    assert not session.go_to_step(1)
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_incomplete_wizard_never_calls_server(valid_values):
    handler = Recorder(httpx.Response(201, json=SUCCESS_BODY))
    session = _session(handler)
    for name, value in valid_values.items():
        await session.update_field(name, value)
    await session.advance_step()

    state = await session.submit()
    assert state.banner == INCOMPLETE_STEPS_BANNER
    assert state.status == SubmissionStatus.IDLE
    assert handler.requests == []


# ── Session persistence ───────────────────────────────────

@pytest.mark.asyncio
async def test_session_persists_text_but_not_passwords(valid_values):
    storage = MemoryFormStorage("42")
    session = _session(Recorder(httpx.Response(201)), storage)
    for name, value in valid_values.items():
        await session.update_field(name, value)

    saved = json.loads(storage.data["vendor_onboarding:42:form_data"])
    assert saved["email"] == "abebe@example.com"
    assert "password" not in saved
    assert "password_confirmation" not in saved


@pytest.mark.asyncio
async def test_session_load_restores_progress(valid_values):
    storage = MemoryFormStorage("42")
    first = _session(Recorder(httpx.Response(201)), storage)
    for name, value in valid_values.items():
        await first.update_field(name, value)
    assert await first.advance_step()

    second = _session(Recorder(httpx.Response(201)), storage)
    state = await second.load()
    assert state.values["business_name"] == "Kebede Electronics"
    assert "password" not in state.values
    assert state.completed_steps == {1}
    assert state.current_step == 1


@pytest.mark.asyncio
async def test_advance_step_reports_failure():
    session = _session(Recorder(httpx.Response(201)))
    assert not await session.advance_step()
    assert session.state.current_step == 1


@pytest.mark.asyncio
async def test_session_validate_step_keeps_progress(valid_values):
    session = _session(Recorder(httpx.Response(201)))
    for name, value in valid_values.items():
        await session.update_field(name, value)

    assert session.validate_step(2)
    assert session.state.completed_steps == frozenset()
    assert session.state.current_step == 1
    assert not session.validate_step(4)
    assert session.state.focus_field == "trade_license_doc"


@pytest.mark.asyncio
async def test_reset_clears_storage(valid_values):
    storage = MemoryFormStorage("42")
    session = _session(Recorder(httpx.Response(201)), storage)
    await session.update_field("name", "Abebe")
    await session.reset()
    assert storage.data == {}
    assert session.state.values == {}


# ── Response parsing ──────────────────────────────────────

def test_parse_response_variants():
    assert isinstance(parse_response(httpx.Response(201, json=SUCCESS_BODY)), Accepted)
    assert parse_response(httpx.Response(200, json=SUCCESS_BODY)).data["status"] == "pending_review"
    assert parse_response(httpx.Response(422, json={"errors": {"email": "Taken."}})) == FieldErrors(
        errors={"email": "Taken."}
    )
    assert parse_response(httpx.Response(422, json={"errors": {}, "detail": "Bad."})) == PlainMessage("Bad.")
    assert parse_response(httpx.Response(502, text="<html>")) == HttpFailure(status_code=502)


def test_parse_response_takes_first_message_per_field():
    parsed = parse_response(httpx.Response(422, json={
        "errors": {
            "tin_number": ["The tin number must be at least 10 characters.", "Second."],
            "tax_id": [],
            "website": None,
        },
    }))
    assert parsed.errors == {"tin_number": "The tin number must be at least 10 characters."}
