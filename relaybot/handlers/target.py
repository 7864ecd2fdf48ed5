from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from ..directory import UserDirectory

router = Router(name="target")

def _parse_target(command: CommandObject) -> int | None:
    """'/set_target 123' -> 123; пусто, мусор или 0 -> None."""
    raw = (command.args or "").split()
    if not raw:
        return None
    try:
        target_id = int(raw[0])
    except ValueError:
        return None
    return target_id or None

@router.message(Command("set_target"))
async def set_target(message: Message, command: CommandObject, directory: UserDirectory):
    if not message.from_user:
        return
    target_id = _parse_target(command)
    if target_id is None:
        await message.answer(
            "Please provide a valid target user ID.\n"
            "Usage: /set_target &lt;user_id&gt;"
        )
        return
    directory.set_target(message.from_user.id, target_id)
    await message.answer(
        f"✅ Target set to: <code>{target_id}</code>\n\n"
        "All media you send will now be forwarded to this user."
    )

@router.message(Command("change_target"))
async def change_target(message: Message, command: CommandObject, directory: UserDirectory):
    if not message.from_user:
        return
    target_id = _parse_target(command)
    if target_id is None:
        await message.answer(
            "Please provide a valid target user ID.\n"
            "Usage: /change_target &lt;user_id&gt;"
        )
        return
    directory.set_target(message.from_user.id, target_id)
    await message.answer(f"✅ Target updated to: <code>{target_id}</code>")

@router.message(Command("get_target"))
async def get_target(message: Message, directory: UserDirectory):
    if not message.from_user:
        return
    target = directory.find_target(message.from_user.id)
    if not target:
        await message.answer(
            "❌ No target set.\n"
            "Use /set_target &lt;user_id&gt; to configure a recipient."
        )
        return
    await message.answer(f"📍 Current target: <code>{target}</code>")
