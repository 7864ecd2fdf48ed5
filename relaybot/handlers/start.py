from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

router = Router(name="start")

HELP_TEXT = (
    "<b>📋 Available Commands:</b>\n\n"
    "🚀 /start - Welcome message\n"
    "🎯 /set_target &lt;id&gt; - Set media recipient\n"
    "📍 /get_target - Show current recipient\n"
    "🔄 /change_target &lt;id&gt; - Update recipient\n"
    "📡 /status - Check bot status\n"
    "🟢 /live - Check if bot is awake\n"
    "🔐 /power_on - Turn bot ON (Admin only)\n"
    "🔒 /power_off - Turn bot OFF (Admin only)\n"
    "❓ /help - Show this message"
)

@router.message(CommandStart())
async def start(message: Message):
    await message.answer(
        "Welcome! 👋\n\n"
        "Use /set_target &lt;user_id&gt; to specify who receives your media.\n"
        "Use /get_target to see your current target.\n"
        "Use /change_target &lt;user_id&gt; to update it.\n"
        "Use /help for more info."
    )

@router.message(Command("help"))
async def help_cmd(message: Message):
    await message.answer(HELP_TEXT)
