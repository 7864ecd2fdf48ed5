import logging
from enum import Enum
from typing import List

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.text_decorations import html_decoration
from apscheduler.schedulers.base import BaseScheduler

from .media import ALBUM_KINDS, MediaItem, MediaKind
from .utils.media_group_buffer import GroupAggregator
from .utils.rate_limiter import RateLimiter

log = logging.getLogger(__name__)

RECIPIENT_UNREACHABLE_TEXT = (
    "❌ Cannot send to target user.\n\n"
    "The recipient must start the bot first:\n"
    "1. They need to search for this bot\n"
    "2. Click /start\n"
    "3. Then you can send media to them"
)


class SendOutcome(str, Enum):
    SENT = "sent"
    RECIPIENT_UNREACHABLE = "recipient_unreachable"
    FAILED = "failed"


def error_detail(exc: BaseException) -> str:
    # у ошибок aiogram в .message лежит description от Telegram
    if isinstance(exc, TelegramAPIError) and exc.message:
        return exc.message
    return str(exc) or "Unknown error"


def classify_failure(exc: BaseException) -> SendOutcome:
    if "chat not found" in error_detail(exc).lower():
        return SendOutcome.RECIPIENT_UNREACHABLE
    return SendOutcome.FAILED


def failure_text(what: str, exc: BaseException) -> str:
    if classify_failure(exc) is SendOutcome.RECIPIENT_UNREACHABLE:
        return RECIPIENT_UNREACHABLE_TEXT
    return f"❌ Failed to forward {what}. Error: {html_decoration.quote(error_detail(exc))}"


class DispatchPipeline:
    """Пересылка медиа: одиночные сразу (с паузой), альбомы — через буфер."""

    def __init__(self, bot: Bot, limiter: RateLimiter, scheduler: BaseScheduler, interval_ms: int):
        self.bot = bot
        self.limiter = limiter
        self.groups = GroupAggregator(scheduler, self.send_batch, interval_ms)

    async def submit(self, sender_id: int, recipient: int, item: MediaItem):
        """Альбомное фото/видео — в буфер (вернёт None), остальное отправляется сразу."""
        if item.group_key and item.kind in ALBUM_KINDS:
            self.groups.add(item.group_key, sender_id, recipient, item)
            return None
        return await self.send_single(sender_id, recipient, item)

    async def send_single(self, sender_id: int, recipient: int, item: MediaItem) -> SendOutcome:
        try:
            await self.limiter.apply_delay(sender_id)
            if item.kind == MediaKind.PHOTO:
                await self.bot.send_photo(recipient, item.file_id, caption=item.caption, parse_mode=None)
            elif item.kind == MediaKind.VIDEO:
                await self.bot.send_video(recipient, item.file_id, caption=item.caption, parse_mode=None)
            elif item.kind == MediaKind.DOCUMENT:
                await self.bot.send_document(recipient, item.file_id, caption=item.caption, parse_mode=None)
            else:
                await self.bot.send_audio(recipient, item.file_id, caption=item.caption, parse_mode=None)
            log.info("[%s] Forwarded from %s to %s", item.kind.value.upper(), sender_id, recipient)
            return SendOutcome.SENT
        except Exception as e:
            log.error("Failed to forward %s from %s to %s: %s",
                      item.kind.value, sender_id, recipient, error_detail(e))
            await self._notify_sender(sender_id, failure_text(item.kind.value, e))
            return classify_failure(e)

    async def send_batch(self, sender_id: int, recipient: int, items: List[MediaItem]) -> SendOutcome:
        try:
            # одна пауза на весь альбом
            await self.limiter.apply_delay(sender_id)
            media = [it.to_input_media() for it in items]
            await self.bot.send_media_group(recipient, media=media)
            log.info("[MEDIA GROUP] Forwarded %d items from %s to %s", len(items), sender_id, recipient)
            return SendOutcome.SENT
        except Exception as e:
            log.error("Failed to forward media group from %s to %s: %s",
                      sender_id, recipient, error_detail(e))
            await self._notify_sender(sender_id, failure_text("media group", e))
            return classify_failure(e)

    async def _notify_sender(self, sender_id: int, text: str) -> None:
        try:
            await self.bot.send_message(sender_id, text)
        except Exception as e:
            log.warning("notify sender %s failed: %s", sender_id, e)
