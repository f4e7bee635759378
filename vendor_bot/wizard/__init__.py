"""Vendor onboarding wizard: field catalogue, validation, state, storage and submission."""

from vendor_bot.wizard.client import RegistrationClient
from vendor_bot.wizard.fields import Attachment, BusinessType, FieldKind
from vendor_bot.wizard.session import WizardSession
from vendor_bot.wizard.state import SubmissionStatus, WizardState
from vendor_bot.wizard.storage import FormStorage, MemoryFormStorage, RedisFormStorage

__all__ = [
    "Attachment", "BusinessType", "FieldKind",
    "RegistrationClient", "WizardSession",
    "SubmissionStatus", "WizardState",
    "FormStorage", "MemoryFormStorage", "RedisFormStorage",
]
