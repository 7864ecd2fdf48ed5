import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from ..media import ALBUM_KINDS, MediaItem

log = logging.getLogger(__name__)

FlushCallback = Callable[[int, int, List[MediaItem]], Awaitable[object]]

FLUSH_MARGIN_MS = 1000
FLUSH_FLOOR_MS = 4000


@dataclass
class PendingGroup:
    group_key: str
    sender_id: int
    recipient: int
    items: List[MediaItem] = field(default_factory=list)
    job_id: Optional[str] = None


class GroupAggregator:
    """
    Буферизация альбомов (media_group) с «тихим» окном:
    - каждое новое сообщение группы перевзводит таймер (старый job заменяется);
    - когда сообщений нет flush_delay секунд — весь пакет уходит в on_flush;
    - Telegram не присылает признак «конец альбома», так что таймер — единственный сигнал.

    Таймеры — одноразовые date-job'ы APScheduler с id ``album:<key>``.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        on_flush: FlushCallback,
        interval_ms: int,
        margin_ms: int = FLUSH_MARGIN_MS,
        floor_ms: int = FLUSH_FLOOR_MS,
    ):
        self._scheduler = scheduler
        self._on_flush = on_flush
        self._groups: Dict[str, PendingGroup] = {}
        # ждём дольше интервала, чтобы пауза лимитера успела истечь (но гарантии нет)
        self.flush_delay = max(interval_ms + margin_ms, floor_ms) / 1000.0

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, group_key: str) -> bool:
        return group_key in self._groups

    def pending(self, group_key: str) -> Optional[PendingGroup]:
        return self._groups.get(group_key)

    def add(self, group_key: str, sender_id: int, recipient: int, item: MediaItem) -> PendingGroup:
        group = self._groups.get(group_key)
        if group is None:
            group = PendingGroup(group_key, sender_id, recipient)
            self._groups[group_key] = group
        group.items.append(item)

        job_id = f"album:{group_key}"
        run_date = datetime.now(timezone.utc) + timedelta(seconds=self.flush_delay)
        self._scheduler.add_job(
            self.flush,
            "date",
            run_date=run_date,
            args=[group_key],
            id=job_id,
            replace_existing=True,
            misfire_grace_time=None,
            # предыдущий flush с тем же ключом может ещё ждать лимитер
            max_instances=2,
        )
        group.job_id = job_id
        log.info("Album %s: buffered item #%d from %s", group_key, len(group.items), sender_id)
        return group

    def cancel(self, group_key: str) -> Optional[PendingGroup]:
        """Выкинуть группу без отправки."""
        group = self._groups.pop(group_key, None)
        if group is not None:
            self._drop_job(group)
        return group

    def _drop_job(self, group: PendingGroup) -> None:
        if not group.job_id:
            return
        try:
            self._scheduler.remove_job(group.job_id)
        except JobLookupError:
            # job уже сработал — это он нас и вызвал
            pass

    async def flush(self, group_key: str) -> None:
        # сначала забираем группу: повторный вызов ничего не сделает
        group = self._groups.pop(group_key, None)
        if group is None:
            return
        self._drop_job(group)

        items = [it for it in group.items if it.kind in ALBUM_KINDS]
        if not items:
            log.info("Album %s: nothing to send after filtering", group_key)
            return
        log.info("Album %s: flushing %d items from %s to %s",
                 group_key, len(items), group.sender_id, group.recipient)
        await self._on_flush(group.sender_id, group.recipient, items)
