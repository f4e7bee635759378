"""
Vendor Onboarding Bot Handler — 5-step registration wizard in chat.

Flow:
  1. Personal Information → 2. Business Information → 3. Legal & Tax
  → 4. Document Upload → 5. Review & Submit

Each Telegram user owns one WizardSession. Within a step the bot asks for
every missing or invalid field, then shows a step card with Continue.
Text fields and completed steps survive restarts through Redis;
passwords and documents have to be entered again.
"""

import html
import logging

from aiogram import Router, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from vendor_bot.config import settings
from vendor_bot.keyboards.vendor_kb import (
    business_type_keyboard,
    retry_keyboard,
    review_keyboard,
    skip_keyboard,
    start_keyboard,
    step_card_keyboard,
    submitted_keyboard,
)
from vendor_bot.services.sessions import SessionRegistry
from vendor_bot.states.vendor_onboarding import VendorOnboarding
from vendor_bot.wizard import (
    Attachment,
    BusinessType,
    FieldKind,
    RedisFormStorage,
    RegistrationClient,
    SubmissionStatus,
    WizardSession,
    WizardState,
)
from vendor_bot.wizard.fields import (
    BUSINESS_TYPE_LABELS,
    FIELDS,
    FIELDS_BY_NAME,
    LAST_STEP,
    STEP_REVIEW,
    STEP_TITLES,
    TOTAL_STEPS,
    FieldSpec,
    fields_for_step,
    get_field,
    step_of,
)
from vendor_bot.wizard.storage import get_redis

router = Router()
logger = logging.getLogger(__name__)

MAX_DOCUMENT_BYTES = 20 * 1024 * 1024  # Bot API download limit

FIELD_PROMPTS = {
    "name": "What is your <b>full name</b>?",
    "email": "Enter your <b>email address</b>:",
    "phone_number": "Enter your <b>phone number</b>\n(e.g. +251912345678 or 0912345678):",
    "password": (
        "Choose a <b>password</b> (at least 8 characters).\n"
        "🔒 <i>Your message will be deleted right away.</i>"
    ),
    "password_confirmation": "Please <b>confirm your password</b>:",
    "business_name": "What is your <b>business name</b>?",
    "business_type": "What <b>type of business</b> do you run?",
    "business_description": "Briefly <b>describe your business</b> (at least 10 characters):",
    "business_email": "Enter your <b>business email</b>:",
    "business_phone": "Enter your <b>business phone number</b>:",
    "business_address": "Enter your <b>business address</b> (street, city):",
    "website": "Enter your <b>website</b> (optional):",
    "tin_number": "Enter your <b>TIN number</b> (at least 10 characters):",
    "trade_license_number": "Enter your <b>trade license number</b>:",
    "tax_id": "Enter your <b>tax ID</b>:",
    "trade_license_doc": "📄 Send a <b>photo or PDF</b> of your <b>trade license</b>.",
    "id_card_doc": "🪪 Send a <b>photo or PDF</b> of your <b>ID card</b> (national ID or passport).",
}


async def _open_session(user_id: int) -> WizardSession:
    """Build a session for a user and restore saved progress from Redis."""
    redis = await get_redis(settings.REDIS_URL)
    session = WizardSession(
        storage=RedisFormStorage(redis, user_id, ttl_seconds=settings.FORM_TTL_SECONDS),
        client=RegistrationClient(
            settings.API_BASE_URL,
            settings.REGISTRATION_PATH,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            api_token=settings.REGISTRATION_API_TOKEN or None,
        ),
    )
    wizard = await session.load()
    if wizard.completed_steps:
        session.go_to_step(min(max(wizard.completed_steps) + 1, LAST_STEP))
    return session


sessions = SessionRegistry(
    _open_session,
    idle_seconds=settings.SESSION_IDLE_SECONDS,
    max_sessions=settings.MAX_SESSIONS,
)


async def get_session(user_id: int) -> WizardSession:
    return await sessions.get(user_id)


# ── Rendering helpers ─────────────────────────────────────

def pending_field(state: WizardState) -> FieldSpec | None:
    """First field of the current step that is unanswered or has an error."""
    for spec in fields_for_step(state.current_step):
        if spec.name in state.field_errors:
            return spec
        if spec.kind == FieldKind.FILE:
            if spec.name not in state.attachments:
                return spec
        elif spec.name not in state.values:
            return spec
    return None


def display_value(state: WizardState, spec: FieldSpec) -> str:
    if spec.kind == FieldKind.FILE:
        doc = state.attachments.get(spec.name)
        return f"✅ {html.escape(doc.filename)}" if doc else "❌ Missing"
    value = state.value(spec.name)
    if not value:
        return "Not provided" if not spec.required else "—"
    if spec.kind == FieldKind.SECRET:
        return "••••••••"
    if spec.name == "business_type":
        try:
            return BUSINESS_TYPE_LABELS[BusinessType(value)]
        except ValueError:
            return html.escape(value)
    return html.escape(value)


def step_header(step: int) -> str:
    return (
        "━━━━━━━━━━━━━━━━━━━━━━\n"
        f"<b>Step {step}/{TOTAL_STEPS}: {STEP_TITLES[step]}</b>\n"
        "━━━━━━━━━━━━━━━━━━━━━━\n\n"
    )


def error_lines(state: WizardState) -> str:
    lines = []
    if state.banner:
        lines.append(f"⚠️ {html.escape(state.banner)}")
    for name, message in state.field_errors.items():
        label = FIELDS_BY_NAME[name].label if name in FIELDS_BY_NAME else name
        lines.append(f"• <b>{html.escape(label)}:</b> {html.escape(message)}")
    return "\n".join(lines)


def step_card_text(state: WizardState) -> str:
    rows = [
        f"<b>{spec.label}:</b> {display_value(state, spec)}"
        for spec in fields_for_step(state.current_step)
    ]
    text = step_header(state.current_step) + "\n".join(rows)
    errors = error_lines(state)
    if errors:
        text += f"\n\n{errors}"
    return text + "\n\nTap <b>Continue</b> when everything looks right."


def review_text(state: WizardState) -> str:
    sections = []
    for step in range(1, LAST_STEP):
        rows = [
            f"  {spec.label}: {display_value(state, spec)}"
            for spec in FIELDS if spec.step == step
        ]
        sections.append(f"<b>{STEP_TITLES[step]}</b>\n" + "\n".join(rows))
    text = step_header(STEP_REVIEW) + "\n\n".join(sections)
    errors = error_lines(state)
    if errors:
        text += f"\n\n{errors}"
    return text + "\n\nDoes everything look correct?"


async def _delete_quietly(message: Message) -> None:
    try:
        await message.delete()
    except TelegramBadRequest as e:
        logger.warning("Could not delete sensitive message: %s", e)


# ── Flow driver ───────────────────────────────────────────

async def _prompt_field(
    message: Message,
    state: FSMContext,
    session: WizardSession,
    spec: FieldSpec,
    editing: bool = False,
) -> None:
    wizard = session.state
    text = step_header(wizard.current_step)
    if wizard.banner:
        text += f"⚠️ {html.escape(wizard.banner)}\n"
    error = wizard.field_errors.get(spec.name)
    if error:
        text += f"⚠️ {html.escape(error)}\n"
    if wizard.banner or error:
        text += "\n"
    text += FIELD_PROMPTS[spec.name]

    reply_markup = None
    if spec.name == "business_type":
        await state.set_state(VendorOnboarding.business_type)
        reply_markup = business_type_keyboard()
    elif spec.kind == FieldKind.FILE:
        await state.set_state(VendorOnboarding.document)
    else:
        await state.set_state(VendorOnboarding.text_field)
        if not spec.required:
            reply_markup = skip_keyboard(spec.name)

    await state.update_data(field=spec.name, editing=editing)
    await message.answer(text, reply_markup=reply_markup)


async def _continue(message: Message, state: FSMContext, session: WizardSession) -> None:
    """Show whatever the wizard needs next: a field prompt, a step card or the review."""
    wizard = session.state

    if wizard.status == SubmissionStatus.SUBMITTED:
        await _show_submitted(message, wizard)
        return

    if wizard.current_step == STEP_REVIEW:
        await state.set_state(VendorOnboarding.review)
        await message.answer(review_text(wizard), reply_markup=review_keyboard(wizard))
        return

    spec = pending_field(wizard)
    if spec is not None:
        await _prompt_field(message, state, session, spec)
        return

    await state.set_state(None)
    await message.answer(
        step_card_text(wizard),
        reply_markup=step_card_keyboard(wizard, fields_for_step(wizard.current_step)),
    )


async def _after_answer(message: Message, state: FSMContext, session: WizardSession, name: str) -> None:
    data = await state.get_data()
    if name in session.state.field_errors:
        await _prompt_field(message, state, session, get_field(name), editing=bool(data.get("editing")))
        return
    if data.get("editing"):
        await state.set_state(None)
        wizard = session.state
        await message.answer(
            step_card_text(wizard),
            reply_markup=step_card_keyboard(wizard, fields_for_step(wizard.current_step)),
        )
        return
    await _continue(message, state, session)


async def _show_submitted(message: Message, wizard: WizardState) -> None:
    result = wizard.result or {}
    await message.answer(
        "━━━━━━━━━━━━━━━━━━━━━━\n"
        "🎉 <b>Application Submitted!</b>\n"
        "━━━━━━━━━━━━━━━━━━━━━━\n\n"
        f"Application ID: <code>{html.escape(str(result.get('application_id', '—')))}</code>\n"
        f"Business: <b>{html.escape(str(result.get('business_name', '')))}</b>\n\n"
        "Our team will review your application within "
        f"<b>{html.escape(str(result.get('estimated_review_time', '2-3 business days')))}</b>.\n"
        "We'll email you once it's processed. 🔔",
        reply_markup=submitted_keyboard(settings.SUPPORT_URL),
    )


# ── Entry points ──────────────────────────────────────────

@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext):
    """Welcome message with the registration button."""
    await state.clear()
    await message.answer(
        "👋 <b>Welcome!</b>\n\n"
        "Sell on our marketplace in a few minutes.\n"
        "Have your <b>trade license</b> and <b>ID card</b> ready.",
        reply_markup=start_keyboard(),
    )


@router.callback_query(F.data == "register_vendor")
async def start_vendor_onboarding(callback: CallbackQuery, state: FSMContext):
    """Begin or resume the wizard."""
    await callback.answer()
    session = await get_session(callback.from_user.id)

    if session.state.status == SubmissionStatus.SUBMITTED:
        await session.reset()

    wizard = session.state
    if wizard.completed_steps:
        session.go_to_step(min(max(wizard.completed_steps) + 1, LAST_STEP))
        intro = "👋 <b>Welcome back!</b> Picking up where you left off.\n"
        if 1 in wizard.completed_steps:
            intro += "🔒 <i>Passwords and documents are never saved, you may be asked for them again.</i>"
    else:
        intro = (
            "🏪 <b>Vendor Registration</b>\n\n"
            f"This takes about 5 minutes across {TOTAL_STEPS} steps."
        )

    await callback.message.edit_text(intro)
    await _continue(callback.message, state, session)


# ── Field answers ─────────────────────────────────────────

@router.message(VendorOnboarding.text_field, F.text)
async def process_text_field(message: Message, state: FSMContext):
    """Store a free-text answer for the prompted field."""
    session = await get_session(message.from_user.id)
    name = (await state.get_data()).get("field")
    if name not in FIELDS_BY_NAME:
        await _continue(message, state, session)
        return

    await session.update_field(name, message.text)
    if get_field(name).kind == FieldKind.SECRET:
        await _delete_quietly(message)
    await _after_answer(message, state, session, name)


@router.callback_query(F.data.startswith("vo_skip_"), VendorOnboarding.text_field)
async def skip_optional_field(callback: CallbackQuery, state: FSMContext):
    """Leave an optional field empty."""
    await callback.answer()
    name = callback.data.replace("vo_skip_", "")
    if name not in FIELDS_BY_NAME or get_field(name).required:
        return
    session = await get_session(callback.from_user.id)
    await session.update_field(name, "")
    await _after_answer(callback.message, state, session, name)


@router.callback_query(F.data.startswith("btype_"), VendorOnboarding.business_type)
async def process_business_type(callback: CallbackQuery, state: FSMContext):
    """Select the business category."""
    await callback.answer()
    session = await get_session(callback.from_user.id)
    await session.update_field("business_type", callback.data.replace("btype_", ""))
    await _after_answer(callback.message, state, session, "business_type")


@router.message(VendorOnboarding.document, F.photo | F.document)
async def process_document(message: Message, state: FSMContext):
    """Download an uploaded document into the session (memory only)."""
    session = await get_session(message.from_user.id)
    name = (await state.get_data()).get("field")
    if name not in FIELDS_BY_NAME or get_field(name).kind != FieldKind.FILE:
        await _continue(message, state, session)
        return

    if message.document:
        file = message.document
        filename = file.file_name or f"{name}.bin"
        content_type = file.mime_type or "application/octet-stream"
    else:
        file = message.photo[-1]  # Largest size
        filename = f"{name}.jpg"
        content_type = "image/jpeg"

    if file.file_size and file.file_size > MAX_DOCUMENT_BYTES:
        await message.answer("⚠️ That file is too large (max 20 MB). Please send a smaller one.")
        return

    try:
        buffer = await message.bot.download(file)
    except TelegramBadRequest as e:
        logger.warning("Document download failed: user=%s, error=%s", message.from_user.id, e)
        await message.answer("⚠️ Could not read that file. Please send it again.")
        return

    await session.update_field(
        name,
        Attachment(filename=filename, content=buffer.read(), content_type=content_type),
    )
    await message.answer(f"✅ {get_field(name).label} received!")
    await _after_answer(message, state, session, name)


@router.message(VendorOnboarding.document)
async def document_invalid(message: Message, state: FSMContext):
    """Handle non-file input for a document step."""
    await message.answer("⚠️ Please send a <b>photo</b> or a <b>PDF file</b> of the document.")


@router.message(VendorOnboarding.business_type)
@router.message(VendorOnboarding.review)
async def use_buttons(message: Message, state: FSMContext):
    await message.answer("👆 Please use the buttons above.")


# ── Navigation ────────────────────────────────────────────

@router.callback_query(F.data.startswith("vo_edit_"))
async def edit_field(callback: CallbackQuery, state: FSMContext):
    """Re-enter one field of the current step."""
    await callback.answer()
    session = await get_session(callback.from_user.id)
    name = callback.data.replace("vo_edit_", "")
    if name not in FIELDS_BY_NAME or step_of(name) != session.state.current_step:
        await _continue(callback.message, state, session)
        return
    await _prompt_field(callback.message, state, session, get_field(name), editing=True)


@router.callback_query(F.data == "vo_next")
async def next_step(callback: CallbackQuery, state: FSMContext):
    """Validate the current step and move on."""
    session = await get_session(callback.from_user.id)
    if await session.advance_step():
        await callback.answer("✅ Saved")
    else:
        await callback.answer("⚠️ Please fix the highlighted fields.")
    await _continue(callback.message, state, session)


@router.callback_query(F.data == "vo_back")
async def previous_step(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    session = await get_session(callback.from_user.id)
    session.go_to_step(session.state.current_step - 1)
    await _continue(callback.message, state, session)


@router.callback_query(F.data.startswith("vo_step_"))
async def jump_to_step(callback: CallbackQuery, state: FSMContext):
    """Revisit an earlier step, or jump ahead through completed ones."""
    session = await get_session(callback.from_user.id)
    try:
        target = int(callback.data.replace("vo_step_", ""))
    except ValueError:
        await callback.answer()
        return

    if target != session.state.current_step and not session.go_to_step(target):
        await callback.answer("⚠️ Please complete the earlier steps first.", show_alert=True)
        return

    await callback.answer()
    await _continue(callback.message, state, session)


@router.callback_query(F.data == "vo_reset")
async def reset_application(callback: CallbackQuery, state: FSMContext):
    """Discard everything, including saved progress."""
    await callback.answer("Starting over.")
    session = await get_session(callback.from_user.id)
    await session.reset()
    sessions.drop(callback.from_user.id)
    await state.clear()
    await _continue(callback.message, state, session)


# ── Submit ────────────────────────────────────────────────

@router.callback_query(F.data == "vo_submit")
async def submit_application(callback: CallbackQuery, state: FSMContext):
    """Send the application to the registration endpoint."""
    session = await get_session(callback.from_user.id)
    if session.state.status == SubmissionStatus.SUBMITTING:
        await callback.answer("⏳ Already submitting...")
        return

    await callback.answer("Submitting...")
    wizard = await session.submit()

    if wizard.status == SubmissionStatus.SUBMITTED:
        sessions.drop(callback.from_user.id)
        await state.clear()
        await _show_submitted(callback.message, wizard)
        logger.info(
            "Vendor application submitted: telegram_id=%s, application_id=%s",
            callback.from_user.id,
            (wizard.result or {}).get("application_id"),
        )
        return

    fix_step = step_of(wizard.focus_field) if wizard.focus_field in FIELDS_BY_NAME else None
    await callback.message.answer(
        "⚠️ <b>Submission Failed</b>\n\n" + error_lines(wizard),
        reply_markup=retry_keyboard(fix_step, settings.SUPPORT_URL),
    )
    logger.warning(
        "Vendor application submission failed: telegram_id=%s, banner=%s",
        callback.from_user.id,
        wizard.banner,
    )
