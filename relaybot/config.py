import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Config:
    bot_token: str
    admin_ids: set[int]
    send_delay_ms: int
    data_dir: str
    storage: str
    timezone: str

def _parse_ids(val: str | None) -> set[int]:
    return {int(x) for x in (val or "").replace(" ", "").split(",") if x}

def get_config() -> Config:
    # ADMIN_ID (один админ) тоже принимаем
    admins = _parse_ids(os.getenv("ADMIN_IDS")) | _parse_ids(os.getenv("ADMIN_ID"))
    admins.discard(0)
    return Config(
        bot_token=os.getenv("BOT_TOKEN", ""),
        admin_ids=admins,
        send_delay_ms=int(os.getenv("SEND_DELAY_MS", "3000")),
        data_dir=os.getenv("DATA_DIR", "./data"),
        storage=os.getenv("STORAGE", "json").strip().lower(),
        timezone=os.getenv("TZ", "UTC"),
    )
