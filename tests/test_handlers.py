import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from aiogram.filters import CommandObject

sys.path.append(str(Path(__file__).resolve().parent.parent))

from relaybot.config import Config
from relaybot.directory import JsonUserDirectory
from relaybot.handlers import admin, media, target
from relaybot.media import MediaItem, MediaKind
from relaybot.power import PowerState


class FakeBot:
    def __init__(self):
        self.messages = []

    async def send_message(self, chat_id, text, **kw):
        self.messages.append((chat_id, text))


class FakeMessage:
    """Минимум от aiogram.types.Message, который трогают хендлеры."""

    def __init__(self, user_id=1, bot=None, **fields):
        self.from_user = SimpleNamespace(id=user_id)
        self.bot = bot or FakeBot()
        self.answers = []
        self.photo = fields.get("photo")
        self.video = fields.get("video")
        self.document = fields.get("document")
        self.audio = fields.get("audio")
        self.caption = fields.get("caption")
        self.media_group_id = fields.get("media_group_id")

    async def answer(self, text, **kw):
        self.answers.append(text)


class FakePipeline:
    def __init__(self):
        self.submitted = []

    async def submit(self, sender_id, recipient, item):
        self.submitted.append((sender_id, recipient, item))


def cmd(name, args=None):
    return CommandObject(prefix="/", command=name, args=args)


@pytest.fixture
def directory(tmp_path):
    return JsonUserDirectory(str(tmp_path / "data.json"))


@pytest.fixture
def cfg(tmp_path):
    return Config(bot_token="t", admin_ids={42}, send_delay_ms=500,
                  data_dir=str(tmp_path), storage="json", timezone="UTC")


@pytest.mark.asyncio
async def test_set_target_stores_recipient(directory):
    msg = FakeMessage(user_id=5)
    await target.set_target(msg, cmd("set_target", "777"), directory)
    assert directory.find_target(5) == 777
    assert "777" in msg.answers[0]


@pytest.mark.asyncio
@pytest.mark.parametrize("args", [None, "", "abc", "0"])
async def test_set_target_rejects_bad_id(directory, args):
    msg = FakeMessage(user_id=5)
    await target.set_target(msg, cmd("set_target", args), directory)
    assert directory.find_target(5) is None
    assert "Usage: /set_target" in msg.answers[0]


@pytest.mark.asyncio
async def test_change_and_get_target(directory):
    msg = FakeMessage(user_id=5)
    await target.get_target(msg, directory)
    assert msg.answers[-1].startswith("❌ No target set.")

    await target.change_target(msg, cmd("change_target", "-100123"), directory)
    assert directory.find_target(5) == -100123
    await target.get_target(msg, directory)
    assert "-100123" in msg.answers[-1]


@pytest.mark.asyncio
async def test_power_commands_admin_only(cfg, directory):
    power = PowerState(ready=True)
    msg = FakeMessage(user_id=1)
    await admin.power_off(msg, cfg, power, directory)
    assert msg.answers == ["❌ Unauthorized. Admin only."]
    assert power.enabled


@pytest.mark.asyncio
async def test_power_off_then_on_broadcasts(cfg, directory):
    directory.set_target(1, 2)
    power = PowerState(ready=True)
    bot = FakeBot()
    msg = FakeMessage(user_id=42, bot=bot)

    await admin.power_off(msg, cfg, power, directory)
    assert not power.enabled
    assert msg.answers[-1] == "🔴 Bot is now DISABLED"
    assert sorted(chat for chat, _ in bot.messages) == [1, 2]

    await admin.power_off(msg, cfg, power, directory)
    assert msg.answers[-1] == "ℹ️ Bot is already disabled."

    bot.messages.clear()
    await admin.power_on(msg, cfg, power, directory)
    assert power.enabled
    assert all("ONLINE" in text for _, text in bot.messages)
    assert len(bot.messages) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("power,expected", [
    (PowerState(enabled=True, ready=False), "⏳ Waking up... try again in a few seconds"),
    (PowerState(enabled=False, ready=True), "⛔ Bot is OFFLINE by admin."),
    (PowerState(enabled=True, ready=True), "🟢 Bot is online and ready."),
])
async def test_live(power, expected):
    msg = FakeMessage()
    await admin.live(msg, power)
    assert msg.answers == [expected]


@pytest.mark.asyncio
async def test_media_rejected_when_offline(directory):
    directory.set_target(1, 2)
    pipe = FakePipeline()
    msg = FakeMessage(user_id=1, document=SimpleNamespace(file_id="d"))
    await media.on_media(msg, directory, pipe, PowerState(enabled=False, ready=True))
    assert "OFFLINE" in msg.answers[0]
    assert pipe.submitted == []


@pytest.mark.asyncio
async def test_media_requires_target(directory):
    pipe = FakePipeline()
    msg = FakeMessage(user_id=1, document=SimpleNamespace(file_id="d"))
    await media.on_media(msg, directory, pipe, PowerState(ready=True))
    assert msg.answers[0].startswith("❌ No target configured.")
    assert pipe.submitted == []


@pytest.mark.asyncio
async def test_album_photo_submitted_with_group_key(directory):
    directory.set_target(1, 2)
    pipe = FakePipeline()
    sizes = [SimpleNamespace(file_id="small"), SimpleNamespace(file_id="big")]
    msg = FakeMessage(user_id=1, photo=sizes, caption="hello", media_group_id="g1")
    await media.on_media(msg, directory, pipe, PowerState(ready=True))
    assert pipe.submitted == [(1, 2, MediaItem(MediaKind.PHOTO, "big", "hello", "g1"))]


@pytest.mark.asyncio
async def test_document_never_carries_group_key(directory):
    directory.set_target(1, 2)
    pipe = FakePipeline()
    msg = FakeMessage(user_id=1, document=SimpleNamespace(file_id="d"), caption="", media_group_id="g1")
    await media.on_media(msg, directory, pipe, PowerState(ready=True))
    assert pipe.submitted == [(1, 2, MediaItem(MediaKind.DOCUMENT, "d", None, None))]
