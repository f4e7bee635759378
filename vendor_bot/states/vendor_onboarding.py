"""FSM states for the vendor onboarding chat flow."""

from aiogram.fsm.state import StatesGroup, State


class VendorOnboarding(StatesGroup):
    """Which kind of input the bot is waiting for."""
    text_field = State()       # free-text answer for the prompted field
    business_type = State()    # inline keyboard choice
    document = State()         # photo or file upload
    review = State()           # summary shown, waiting for Submit / Edit
