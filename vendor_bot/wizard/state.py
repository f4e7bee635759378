"""
Wizard state and its transitions.

WizardState is immutable; every transition returns a new state (or the
same object when nothing changes). Side effects such as persistence and
HTTP live in WizardSession, not here.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping

from vendor_bot.wizard.fields import (
    LAST_STEP,
    PERSISTED_FIELDS,
    SCALAR_FIELDS,
    STEP_DOCUMENTS,
    STEP_IDENTITY,
    TOTAL_STEPS,
    Attachment,
    FieldKind,
    fields_for_step,
    get_field,
)
from vendor_bot.wizard.validators import validate_field, validate_step_fields

FIX_ERRORS_BANNER = "Please fix the errors below before continuing."
INCOMPLETE_STEPS_BANNER = "Please complete all previous steps before submitting."


class SubmissionStatus(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUBMITTED = "SUBMITTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class WizardState:
    values: dict[str, str] = field(default_factory=dict)
    attachments: dict[str, Attachment] = field(default_factory=dict)
    current_step: int = STEP_IDENTITY
    completed_steps: frozenset[int] = frozenset()
    field_errors: dict[str, str] = field(default_factory=dict)
    banner: str | None = None
    focus_field: str | None = None
    status: SubmissionStatus = SubmissionStatus.IDLE
    result: dict[str, Any] | None = None

    def value(self, name: str) -> str:
        return self.values.get(name, "")

    @property
    def is_last_step(self) -> bool:
        return self.current_step == LAST_STEP

    @property
    def is_locked(self) -> bool:
        """True while a submission is in flight or after it succeeded."""
        return self.status in (SubmissionStatus.SUBMITTING, SubmissionStatus.SUBMITTED)

    def persisted_values(self) -> dict[str, str]:
        return {name: self.values[name] for name in PERSISTED_FIELDS if name in self.values}

    def scalar_payload(self) -> dict[str, str]:
        return {name: self.values.get(name, "") for name in SCALAR_FIELDS}


def initial_state() -> WizardState:
    return WizardState()


def rehydrate(values: Mapping[str, Any], completed_steps: Iterable[Any]) -> WizardState:
    """Build a state from persisted data. Unknown keys and non-text values are dropped."""
    restored = {
        name: values[name]
        for name in PERSISTED_FIELDS
        if isinstance(values.get(name), str)
    }
    steps = frozenset(
        step for step in completed_steps
        if isinstance(step, int) and not isinstance(step, bool) and 1 <= step <= TOTAL_STEPS
    )
    return WizardState(values=restored, completed_steps=steps)


# ── Field edits ────────────────────────────────────────────

def update_field(state: WizardState, name: str, value: Any) -> WizardState:
    """Set a field, re-run its validator and clear the banner."""
    if state.is_locked:
        return state

    spec = get_field(name)
    values = state.values
    attachments = state.attachments

    if spec.kind == FieldKind.FILE:
        if value is not None and not isinstance(value, Attachment):
            raise TypeError(f"{name} expects an Attachment, got {type(value).__name__}")
        attachments = dict(attachments)
        if value is None:
            attachments.pop(name, None)
        else:
            attachments[name] = value
        error = validate_field(name, value)
    else:
        values = {**values, name: "" if value is None else str(value)}
        error = validate_field(name, values[name], values)

    errors = dict(state.field_errors)
    _set_error(errors, name, error)

    # The confirmation depends on the password, keep it in sync once typed.
    if name == "password" and values.get("password_confirmation"):
        _set_error(
            errors,
            "password_confirmation",
            validate_field("password_confirmation", values["password_confirmation"], values),
        )

    return replace(
        state,
        values=values,
        attachments=attachments,
        field_errors=errors,
        banner=None,
    )


def _set_error(errors: dict[str, str], name: str, error: str | None) -> None:
    if error:
        errors[name] = error
    else:
        errors.pop(name, None)


# ── Step validation & navigation ──────────────────────────

def validate_step(state: WizardState, step: int) -> tuple[WizardState, bool]:
    """
    Validate every field of a step.

    Returns the updated state and whether the step passed. On failure the
    failing fields get inline errors, the banner is set and the first
    failing field is focused. completed_steps is never touched.
    """
    failures = validate_step_fields(step, state.values, state.attachments)

    errors = dict(state.field_errors)
    for spec in fields_for_step(step):
        errors.pop(spec.name, None)
    errors.update(failures)

    if failures:
        return replace(
            state,
            field_errors=errors,
            banner=FIX_ERRORS_BANNER,
            focus_field=next(iter(failures)),
        ), False

    return replace(state, field_errors=errors, focus_field=None), True


def advance_step(state: WizardState) -> WizardState:
    """Mark the current step complete and move forward, if it validates."""
    if state.is_locked:
        return state

    state, ok = validate_step(state, state.current_step)
    if not ok:
        return state

    return replace(
        state,
        completed_steps=state.completed_steps | {state.current_step},
        current_step=min(state.current_step + 1, TOTAL_STEPS),
        banner=None,
    )


def can_go_to_step(state: WizardState, target: int) -> bool:
    if not 1 <= target <= TOTAL_STEPS:
        return False
    return target <= state.current_step or (target - 1) in state.completed_steps


def go_to_step(state: WizardState, target: int) -> WizardState:
    """Jump to a step. Forward jumps only through completed steps; otherwise a no-op."""
    if state.is_locked or not can_go_to_step(state, target):
        return state
    if target == state.current_step:
        return state
    return replace(state, current_step=target, banner=None, focus_field=None)


# ── Submission gate ───────────────────────────────────────

def begin_submission(state: WizardState) -> tuple[WizardState, bool]:
    """
    Final validation gate before the request goes out.

    Earlier steps must already be in completed_steps; only the documents
    step is re-validated here, the server re-checks everything else. On
    success the state moves to SUBMITTING with prior errors cleared.
    """
    if state.is_locked:
        return state, False

    missing = [step for step in range(1, STEP_DOCUMENTS) if step not in state.completed_steps]
    if not state.is_last_step or missing:
        return replace(state, banner=INCOMPLETE_STEPS_BANNER), False

    state, ok = validate_step(state, STEP_DOCUMENTS)
    if not ok:
        return state, False

    return replace(
        state,
        status=SubmissionStatus.SUBMITTING,
        field_errors={},
        banner=None,
        focus_field=None,
    ), True
