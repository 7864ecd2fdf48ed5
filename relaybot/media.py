from dataclasses import dataclass
from enum import Enum
from typing import Optional

from aiogram.types import InputMediaPhoto, InputMediaVideo, Message


class MediaKind(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    AUDIO = "audio"


# только эти типы Telegram присылает с media_group_id, который мы собираем в альбом
ALBUM_KINDS = frozenset({MediaKind.PHOTO, MediaKind.VIDEO})


@dataclass(frozen=True)
class MediaItem:
    kind: MediaKind
    file_id: str
    caption: Optional[str] = None
    group_key: Optional[str] = None

    @classmethod
    def from_message(cls, message: Message) -> Optional["MediaItem"]:
        caption = message.caption or None
        if message.photo:
            # последний размер — самый большой
            return cls(MediaKind.PHOTO, message.photo[-1].file_id, caption, message.media_group_id)
        if message.video:
            return cls(MediaKind.VIDEO, message.video.file_id, caption, message.media_group_id)
        if message.document:
            return cls(MediaKind.DOCUMENT, message.document.file_id, caption)
        if message.audio:
            return cls(MediaKind.AUDIO, message.audio.file_id, caption)
        return None

    def to_input_media(self):
        if self.kind == MediaKind.PHOTO:
            return InputMediaPhoto(media=self.file_id, caption=self.caption, parse_mode=None)
        if self.kind == MediaKind.VIDEO:
            return InputMediaVideo(media=self.file_id, caption=self.caption, parse_mode=None)
        raise ValueError(f"{self.kind.value} can't be sent as part of an album")
