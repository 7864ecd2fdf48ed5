from aiogram import Router, F
from aiogram.types import Message

from ..directory import UserDirectory
from ..media import MediaItem
from ..pipeline import DispatchPipeline
from ..power import PowerState

router = Router(name="media")

@router.message(F.photo | F.video | F.document | F.audio)
async def on_media(message: Message, directory: UserDirectory, pipeline: DispatchPipeline, power: PowerState):
    """Фото/видео/документ/аудио -> получателю отправителя."""
    if not message.from_user:
        return

    if not power.enabled:
        await message.answer("🔴 Bot is currently OFFLINE. Media forwarding is suspended.")
        return

    target = directory.find_target(message.from_user.id)
    if not target:
        await message.answer(
            "❌ No target configured.\n"
            "Use /set_target &lt;user_id&gt; first."
        )
        return

    item = MediaItem.from_message(message)
    if item is None:
        return
    await pipeline.submit(message.from_user.id, target, item)
