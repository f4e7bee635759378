"""Inline keyboard builders for the vendor onboarding flow."""

from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from vendor_bot.wizard.fields import (
    BUSINESS_TYPE_LABELS,
    STEP_REVIEW,
    STEP_TITLES,
    FieldSpec,
)
from vendor_bot.wizard.state import WizardState, can_go_to_step


def start_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🏪 Register as a Vendor", callback_data="register_vendor")],
    ])


def business_type_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=label, callback_data=f"btype_{btype.value}")]
        for btype, label in BUSINESS_TYPE_LABELS.items()
    ])


def skip_keyboard(field_name: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="⏩ Skip", callback_data=f"vo_skip_{field_name}")],
    ])


def step_card_keyboard(state: WizardState, fields: tuple[FieldSpec, ...]) -> InlineKeyboardMarkup:
    """Edit buttons for each field of the step, then Back / Continue."""
    buttons = [
        [InlineKeyboardButton(text=f"✏️ {spec.label}", callback_data=f"vo_edit_{spec.name}")]
        for spec in fields
    ]

    nav = []
    if state.current_step > 1:
        nav.append(InlineKeyboardButton(text="⬅️ Back", callback_data="vo_back"))
    nav.append(InlineKeyboardButton(text="➡️ Continue", callback_data="vo_next"))
    buttons.append(nav)

    jumps = step_jump_row(state)
    if jumps:
        buttons.append(jumps)

    buttons.append([InlineKeyboardButton(text="🔄 Start Over", callback_data="vo_reset")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def step_jump_row(state: WizardState) -> list[InlineKeyboardButton]:
    """One button per step the user is allowed to jump to."""
    return [
        InlineKeyboardButton(
            text=f"{step}{' ✅' if step in state.completed_steps else ''}",
            callback_data=f"vo_step_{step}",
        )
        for step in STEP_TITLES
        if step != state.current_step and can_go_to_step(state, step)
    ]


def review_keyboard(state: WizardState) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(text="✅ Submit Application", callback_data="vo_submit")],
    ]
    for step, title in STEP_TITLES.items():
        if step != STEP_REVIEW:
            buttons.append([
                InlineKeyboardButton(text=f"✏️ Edit {title}", callback_data=f"vo_step_{step}")
            ])
    buttons.append([InlineKeyboardButton(text="🔄 Start Over", callback_data="vo_reset")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def retry_keyboard(fix_step: int | None, support_url: str) -> InlineKeyboardMarkup:
    buttons = [[InlineKeyboardButton(text="🔄 Try Again", callback_data="vo_submit")]]
    if fix_step is not None and fix_step != STEP_REVIEW:
        buttons.append([
            InlineKeyboardButton(
                text=f"✏️ Fix {STEP_TITLES[fix_step]}",
                callback_data=f"vo_step_{fix_step}",
            )
        ])
    buttons.append([InlineKeyboardButton(text="📞 Contact Support", url=support_url)])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def submitted_keyboard(support_url: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📞 Contact Support", url=support_url)],
    ])
