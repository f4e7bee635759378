"""
Submission outcome handling.

Maps a resolved registration response, or a transport failure, onto the
wizard state. Failures always leave the data intact and the user on the
last step with status FAILED so they can retry.
"""

from dataclasses import replace

from vendor_bot.wizard.responses import (
    Accepted,
    FieldErrors,
    HttpFailure,
    PlainMessage,
    RegistrationResponse,
)
from vendor_bot.wizard.state import SubmissionStatus, WizardState

CORRECT_ERRORS_BANNER = "Please correct the errors below."
TIMEOUT_MESSAGE = "The request timed out. Please check your connection and try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."
UNEXPECTED_MESSAGE = "An unexpected error occurred. Please try again."
GENERIC_FAILURE_MESSAGE = "Failed to submit application. Please try again."

STATUS_MESSAGES = {
    401: "Your session has expired. Please sign in again and resubmit.",
    403: "You are not allowed to submit a vendor application.",
    404: "The registration service is unavailable right now. Please try again later.",
    429: "Too many attempts. Please wait a moment before trying again.",
    500: "Something went wrong on our side. Please try again later.",
}


def failure_message(status_code: int, server_message: str | None = None) -> str:
    """Banner text for a non-2xx, non-422 response."""
    if status_code in STATUS_MESSAGES:
        return STATUS_MESSAGES[status_code]
    return server_message or GENERIC_FAILURE_MESSAGE


def mark_failed(state: WizardState, banner: str) -> WizardState:
    return replace(state, status=SubmissionStatus.FAILED, banner=banner)


def apply_response(state: WizardState, response: RegistrationResponse) -> WizardState:
    """Fold the endpoint's answer into the state."""
    if isinstance(response, Accepted):
        # Submitted is terminal: the form is purged, only the echoed data stays.
        return WizardState(
            current_step=state.current_step,
            status=SubmissionStatus.SUBMITTED,
            result=response.data,
        )
    if isinstance(response, FieldErrors):
        return replace(
            state,
            status=SubmissionStatus.FAILED,
            field_errors=dict(response.errors),
            banner=CORRECT_ERRORS_BANNER,
            focus_field=next(iter(response.errors)),
        )
    if isinstance(response, PlainMessage):
        return mark_failed(state, response.message)
    if isinstance(response, HttpFailure):
        return mark_failed(state, failure_message(response.status_code, response.message))
    raise TypeError(f"Unsupported registration response: {response!r}")
