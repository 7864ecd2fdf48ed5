import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties
from aiogram.types import BotCommand
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import get_config
from .directory import make_directory
from .pipeline import DispatchPipeline
from .power import PowerState
from .utils.rate_limiter import RateLimiter
from .handlers import (
    start,
    target,
    admin,
    media,
)

log = logging.getLogger(__name__)

COMMANDS = [
    BotCommand(command="start", description="Welcome message"),
    BotCommand(command="set_target", description="Set media recipient"),
    BotCommand(command="get_target", description="Show current recipient"),
    BotCommand(command="change_target", description="Update recipient"),
    BotCommand(command="status", description="Check bot status"),
    BotCommand(command="live", description="Check if bot is awake"),
    BotCommand(command="power_on", description="Turn bot ON (Admin only)"),
    BotCommand(command="power_off", description="Turn bot OFF (Admin only)"),
    BotCommand(command="help", description="Show all commands"),
]


async def main():
    # Логирование
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    cfg = get_config()
    if not cfg.bot_token:
        raise SystemExit("BOT_TOKEN not set in .env file")

    directory = make_directory(cfg)
    power = PowerState()

    bot = Bot(
        token=cfg.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    # Таймеры альбомов живут в планировщике
    scheduler = AsyncIOScheduler(timezone=cfg.timezone)
    scheduler.start()

    limiter = RateLimiter(cfg.send_delay_ms)
    pipeline = DispatchPipeline(bot, limiter, scheduler, cfg.send_delay_ms)

    # Старые апдейты не нужны, webhook мешает long polling
    await bot.delete_webhook(drop_pending_updates=True)

    dp = Dispatcher(cfg=cfg, directory=directory, pipeline=pipeline, power=power)
    dp.include_router(start.router)
    dp.include_router(target.router)
    dp.include_router(admin.router)
    dp.include_router(media.router)

    await bot.set_my_commands(COMMANDS)
    power.ready = True
    log.info("Forwarding bot is running (delay: %sms, storage: %s)...", cfg.send_delay_ms, cfg.storage)

    try:
        await dp.start_polling(bot)
    finally:
        scheduler.shutdown(wait=False)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
