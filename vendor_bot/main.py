"""Vendor onboarding bot entrypoint."""

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.redis import RedisStorage

from vendor_bot.config import settings
from vendor_bot.handlers import vendor_onboarding

logger = logging.getLogger(__name__)


async def run() -> None:
    bot = Bot(
        token=settings.TELEGRAM_BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher(storage=RedisStorage.from_url(settings.REDIS_URL))
    dp.include_router(vendor_onboarding.router)

    logger.info("🚀 Vendor onboarding bot starting, API=%s", settings.API_BASE_URL)
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        logger.info("🛑 Vendor onboarding bot shut down.")


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if not settings.TELEGRAM_BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")
    asyncio.run(run())


if __name__ == "__main__":
    main()
