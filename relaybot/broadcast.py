import logging

from aiogram import Bot

from .directory import UserDirectory

log = logging.getLogger(__name__)


async def notify_all_users(bot: Bot, directory: UserDirectory, text: str) -> int:
    """Шлёт text всем известным пользователям по очереди, ошибки пропускает."""
    users = sorted(directory.list_all_user_ids())
    log.info("[BROADCAST] Notifying %d users...", len(users))
    delivered = 0
    for uid in users:
        try:
            await bot.send_message(uid, text)
            delivered += 1
        except Exception as e:
            log.warning("[BROADCAST] Failed to notify %s: %s", uid, e)
    return delivered
