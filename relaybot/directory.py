import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import db
from .config import Config

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class UserDirectory(ABC):
    """Кто кому пересылает: sender id -> target chat id."""

    @abstractmethod
    def find_target(self, sender_id: int) -> Optional[int]:
        ...

    @abstractmethod
    def set_target(self, sender_id: int, target_id: int) -> None:
        ...

    @abstractmethod
    def list_all_user_ids(self) -> set[int]:
        """Все отправители и их получатели (для рассылки)."""


class JsonUserDirectory(UserDirectory):
    """
    Хранилище в одном JSON-файле:
    [{"userId": ..., "targetId": ..., "createdAt": "..."}]
    Файл перечитывается на каждый запрос, так что правки руками подхватываются сразу.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> List[Dict[str, Any]]:
        try:
            if os.path.exists(self.path):
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, list):
                    return data
                log.warning("Unexpected content in %s, ignoring", self.path)
        except (OSError, ValueError) as e:
            log.warning("Failed to load %s: %s", self.path, e)
        return []

    def _save(self, data: List[Dict[str, Any]]) -> None:
        try:
            d = os.path.dirname(self.path)
            if d:
                os.makedirs(d, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("Failed to save %s: %s", self.path, e)

    def find_target(self, sender_id: int) -> Optional[int]:
        for entry in self._load():
            if entry.get("userId") == sender_id:
                return entry.get("targetId")
        return None

    def set_target(self, sender_id: int, target_id: int) -> None:
        data = self._load()
        for entry in data:
            if entry.get("userId") == sender_id:
                entry["targetId"] = target_id
                break
        else:
            data.append({"userId": sender_id, "targetId": target_id, "createdAt": _now_iso()})
        self._save(data)

    def list_all_user_ids(self) -> set[int]:
        ids: set[int] = set()
        for entry in self._load():
            for key in ("userId", "targetId"):
                if entry.get(key) is not None:
                    ids.add(int(entry[key]))
        return ids


class SqliteUserDirectory(UserDirectory):
    def __init__(self, path: str):
        self.path = path
        db.init_db(path)

    def find_target(self, sender_id: int) -> Optional[int]:
        row = db.fetchone(self.path, "SELECT target_id FROM users WHERE user_id=?", (sender_id,))
        return int(row[0]) if row else None

    def set_target(self, sender_id: int, target_id: int) -> None:
        db.execute(
            self.path,
            "INSERT INTO users(user_id, target_id, created_at) VALUES(?,?,?) "
            "ON CONFLICT(user_id) DO UPDATE SET target_id=excluded.target_id",
            (sender_id, target_id, _now_iso()),
        )

    def list_all_user_ids(self) -> set[int]:
        rows = db.fetchall(self.path, "SELECT user_id, target_id FROM users")
        ids: set[int] = set()
        for uid, tid in rows:
            ids.add(int(uid))
            ids.add(int(tid))
        return ids


def make_directory(cfg: Config) -> UserDirectory:
    if cfg.storage == "json":
        return JsonUserDirectory(os.path.join(cfg.data_dir, "data.json"))
    if cfg.storage == "sqlite":
        return SqliteUserDirectory(os.path.join(cfg.data_dir, "bot.db"))
    raise ValueError(f"Unknown STORAGE backend: {cfg.storage!r} (expected 'json' or 'sqlite')")
