import asyncio
import logging
import time
from collections import defaultdict
from typing import Awaitable, Callable, Dict, Optional

log = logging.getLogger(__name__)


class RateLimiter:
    """
    Пауза между отправками одного пользователя:
    - следующая отправка начинается не раньше, чем через interval после предыдущей
      (считаем от начала отправки, а не от её завершения);
    - пользователи друг друга не ждут;
    - отметка времени ставится всегда, даже если отправка потом упала.
    """

    def __init__(
        self,
        interval_ms: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.interval = max(interval_ms, 0) / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._last_sent: Dict[int, float] = {}
        self._locks: Dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def last_sent(self, sender_id: int) -> Optional[float]:
        return self._last_sent.get(sender_id)

    async def apply_delay(self, sender_id: int) -> float:
        """Ждёт, сколько нужно, и возвращает фактическую паузу в секундах."""
        async with self._locks[sender_id]:
            waited = 0.0
            last = self._last_sent.get(sender_id)
            if last is not None:
                elapsed = self._clock() - last
                if elapsed < self.interval:
                    waited = self.interval - elapsed
                    log.info("Sender %s: waiting %.0fms before sending (delay: %.0fms)",
                             sender_id, waited * 1000, self.interval * 1000)
                    await self._sleep(waited)
            now = self._clock()
            self._last_sent[sender_id] = now if last is None else max(now, last)
            return waited
