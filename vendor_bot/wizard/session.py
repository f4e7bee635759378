"""
WizardSession: one user's wizard, owned by the application shell.

Applies the pure transitions from state.py and performs the side effects
explicitly: durable storage writes after each change of the persisted
subset, and the HTTP call on submit.
"""

import logging
from typing import Any

import httpx

from vendor_bot.wizard.client import RegistrationClient
from vendor_bot.wizard.fields import FieldKind, get_field
from vendor_bot.wizard.state import (
    SubmissionStatus,
    WizardState,
    advance_step,
    begin_submission,
    go_to_step,
    initial_state,
    rehydrate,
    update_field,
    validate_step,
)
from vendor_bot.wizard.storage import FormStorage
from vendor_bot.wizard.submission import (
    NETWORK_MESSAGE,
    TIMEOUT_MESSAGE,
    UNEXPECTED_MESSAGE,
    apply_response,
    mark_failed,
)

logger = logging.getLogger(__name__)


class WizardSession:
    def __init__(self, storage: FormStorage, client: RegistrationClient, state: WizardState | None = None):
        self.storage = storage
        self.client = client
        self.state = state or initial_state()

    async def load(self) -> WizardState:
        """Rehydrate text fields and completed steps from storage."""
        values, steps = await self.storage.load()
        self.state = rehydrate(values, steps)
        return self.state

    async def _persist(self) -> None:
        await self.storage.save(self.state.persisted_values(), self.state.completed_steps)

    async def update_field(self, name: str, value: Any) -> WizardState:
        before = self.state
        self.state = update_field(before, name, value)
        if self.state is not before and get_field(name).kind == FieldKind.TEXT:
            await self._persist()
        return self.state

    def validate_step(self, step: int) -> bool:
        self.state, ok = validate_step(self.state, step)
        return ok

    async def advance_step(self) -> bool:
        before = self.state
        self.state = advance_step(before)
        if self.state.completed_steps != before.completed_steps:
            await self._persist()
        return self.state is not before and self.state.banner is None

    def go_to_step(self, target: int) -> bool:
        before = self.state
        self.state = go_to_step(before, target)
        return self.state is not before

    async def reset(self) -> WizardState:
        self.state = initial_state()
        await self.storage.clear()
        return self.state

    async def submit(self) -> WizardState:
        """
        Validate everything, post the application and fold the result in.

        Never raises: every failure ends up as a banner with status FAILED.
        """
        self.state, ready = begin_submission(self.state)
        if not ready:
            return self.state

        snapshot = self.state
        try:
            response = await self.client.submit_application(
                snapshot.scalar_payload(),
                dict(snapshot.attachments),
            )
        except httpx.TimeoutException as e:
            logger.warning("Vendor application timed out: %s", e)
            self.state = mark_failed(self.state, TIMEOUT_MESSAGE)
            return self.state
        except httpx.RequestError as e:
            logger.warning("Vendor application could not reach the server: %s", e)
            self.state = mark_failed(self.state, NETWORK_MESSAGE)
            return self.state
        except Exception:
            logger.exception("Unexpected error while submitting vendor application")
            self.state = mark_failed(self.state, UNEXPECTED_MESSAGE)
            return self.state

        self.state = apply_response(self.state, response)

        if self.state.status == SubmissionStatus.SUBMITTED:
            await self.storage.clear()
            logger.info(
                "Vendor application submitted: application_id=%s",
                (self.state.result or {}).get("application_id"),
            )
        else:
            logger.warning(
                "Vendor application rejected: banner=%s, fields=%s",
                self.state.banner,
                sorted(self.state.field_errors),
            )
        return self.state
