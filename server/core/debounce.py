import asyncio
import inspect
from typing import Awaitable, Callable, Dict, List, Union

from core.config import DEBOUNCE_DELAY_MS
from core.logging_config import get_logger

logger = get_logger(__name__)

OnFire = Callable[[str], Union[Awaitable[None], None]]


class DebounceScheduler:
    """
    Per-cell debounce timers.

    Each cell key owns at most one asyncio task. The task sleeps for the
    delay, then runs `on_fire(word)`; it stays registered until `on_fire`
    returns, so cancelling a key also drops a verification still in flight.
    """

    def __init__(self, delay: float = DEBOUNCE_DELAY_MS / 1000):
        self.delay = delay
        self._timers: Dict[str, asyncio.Task] = {}

    def schedule(self, cell_key: str, word: str, on_fire: OnFire) -> asyncio.Task:
        self.cancel(cell_key)
        task = asyncio.create_task(self._wait_and_fire(cell_key, word, on_fire))
        self._timers[cell_key] = task
        return task

    def cancel(self, cell_key: str) -> bool:
        task = self._timers.pop(cell_key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self):
        if self._timers:
            logger.debug(f"Cancelling {len(self._timers)} pending validation timers")
        for task in self._timers.values():
            task.cancel()
        self._timers.clear()

    def is_pending(self, cell_key: str) -> bool:
        return cell_key in self._timers

    @property
    def pending_keys(self) -> List[str]:
        return list(self._timers.keys())

    def __len__(self):
        return len(self._timers)

    async def drain(self):
        """Wait until every scheduled task has finished or been cancelled."""
        while self._timers:
            await asyncio.gather(*list(self._timers.values()), return_exceptions=True)

    async def _wait_and_fire(self, cell_key: str, word: str, on_fire: OnFire):
        try:
            await asyncio.sleep(self.delay)
            result = on_fire(word)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception(f"Validation callback failed for cell {cell_key}")
        finally:
            # 현재 태스크가 등록된 태스크와 일치할 때만 제거 (경합 방지)
            if self._timers.get(cell_key) is asyncio.current_task():
                del self._timers[cell_key]
