"""Entry point for the savings goals bot."""
import asyncio
import logging

from rich.traceback import install
install()

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from savings_bot.config.settings import get_settings
from savings_bot.handlers import common, goal_forms, goals, start
from savings_bot.services.http import close_http_session
from savings_bot.utils.logging import init_logging


def register_routers(dispatcher: Dispatcher) -> None:
    """Register all routers to dispatcher."""

    dispatcher.include_router(start.router)
    dispatcher.include_router(goals.router)
    dispatcher.include_router(goal_forms.router)
    dispatcher.include_router(common.router)


async def main() -> None:
    """Run bot polling."""

    init_logging()
    settings = get_settings()
    logger = logging.getLogger(__name__)

    if not settings.api_secret:
        logger.warning("GOALS_API_SECRET is not set, goals are served in offline mode")

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode="HTML"),
    )
    dp = Dispatcher()
    register_routers(dp)

    try:
        logger.info("Starting bot polling (goals API: %s)", settings.api_base_url)
        await dp.start_polling(bot)
    except Exception as error:  # noqa: BLE001
        logger.exception("Bot stopped due to error: %s", error)
    finally:
        await close_http_session()
        await bot.session.close()
        logger.info("Bot shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
