import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from ..broadcast import notify_all_users
from ..config import Config
from ..directory import UserDirectory
from ..power import PowerState

log = logging.getLogger(__name__)

router = Router(name="admin")

def _is_admin(uid: int, cfg: Config) -> bool:
    # без ADMIN_IDS управлять питанием не может никто
    return uid in cfg.admin_ids

@router.message(Command("power_on"))
async def power_on(message: Message, cfg: Config, power: PowerState, directory: UserDirectory):
    if not message.from_user or not _is_admin(message.from_user.id, cfg):
        await message.answer("❌ Unauthorized. Admin only.")
        return
    if power.enabled:
        await message.answer("ℹ️ Bot is already enabled.")
        return
    power.enabled = True
    log.info("[ADMIN] Bot powered ON by %s", message.from_user.id)
    await message.answer("✅ Bot is now ENABLED")
    await notify_all_users(message.bot, directory, "🟢 Bot is now ONLINE. You can send media again.")

@router.message(Command("power_off"))
async def power_off(message: Message, cfg: Config, power: PowerState, directory: UserDirectory):
    if not message.from_user or not _is_admin(message.from_user.id, cfg):
        await message.answer("❌ Unauthorized. Admin only.")
        return
    if not power.enabled:
        await message.answer("ℹ️ Bot is already disabled.")
        return
    power.enabled = False
    log.info("[ADMIN] Bot powered OFF by %s", message.from_user.id)
    await message.answer("🔴 Bot is now DISABLED")
    await notify_all_users(message.bot, directory, "🔴 Bot is now OFFLINE. Media forwarding is suspended.")

@router.message(Command("status"))
async def status(message: Message, power: PowerState):
    await message.answer(f"Bot Status: {'🟢 ONLINE' if power.enabled else '🔴 OFFLINE'}")

@router.message(Command("live"))
async def live(message: Message, power: PowerState):
    if not power.ready:
        await message.answer("⏳ Waking up... try again in a few seconds")
        return
    if not power.enabled:
        await message.answer("⛔ Bot is OFFLINE by admin.")
        return
    await message.answer("🟢 Bot is online and ready.")
