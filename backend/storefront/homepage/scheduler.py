# storefront/homepage/scheduler.py
"""
Lazy-Load Scheduler.

Each placeholder is loaded once, when its visibility signal fires. Without
a signal provider the scheduler falls back to loading placeholders in
fixed-size batches, concurrently within a batch. Loads have no deadline:
one that never finishes leaves its placeholder in place.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Set

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 4

Loader = Callable[[], Awaitable[None]]


class VisibilitySignal(Protocol):
    async def wait_visible(self, key: str) -> None:
        """Return once the placeholder identified by ``key`` becomes relevant."""


class ManualSignal:
    """Signal fired explicitly by the caller, one-shot per key."""

    def __init__(self):
        self._events: Dict[str, asyncio.Event] = {}
        self._fired: Set[str] = set()

    def _event(self, key):
        if key not in self._events:
            self._events[key] = asyncio.Event()
        return self._events[key]

    async def wait_visible(self, key: str) -> None:
        await self._event(key).wait()
        # Unregister once fired
        self._events.pop(key, None)

    def trigger(self, key: str) -> bool:
        """Fire ``key``. Returns False when it has fired before."""
        if key in self._fired:
            return False
        self._fired.add(key)
        self._event(key).set()
        return True


class LazyLoadScheduler:
    def __init__(self, signal: Optional[VisibilitySignal] = None, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError("batch_size must be greater than zero")
        self.signal = signal
        self.batch_size = batch_size
        self._pending: Dict[str, Loader] = {}
        self._scheduled: Set[str] = set()
        self.loaded: List[str] = []

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    def schedule(self, key: str, loader: Loader) -> bool:
        """Register a one-shot load for ``key``. False if ``key`` was already scheduled."""
        if key in self._scheduled:
            return False
        self._scheduled.add(key)
        self._pending[key] = loader
        return True

    async def run(self) -> None:
        """Load everything scheduled so far, then return."""
        while self._pending:
            if self.signal is None:
                await self._run_batches()
            else:
                await self._run_on_signal()

    async def _load(self, key: str, loader: Loader) -> None:
        try:
            await loader()
        except Exception:
            logger.exception("Lazy load failed for %s", key)
        self.loaded.append(key)

    async def _run_batches(self) -> None:
        keys = list(self._pending)
        for start in range(0, len(keys), self.batch_size):
            batch = keys[start:start + self.batch_size]
            await asyncio.gather(*(self._load(key, self._pending.pop(key)) for key in batch))

    async def _run_on_signal(self) -> None:
        async def wait_then_load(key, loader):
            await self.signal.wait_visible(key)
            await self._load(key, loader)

        batch = [(key, self._pending.pop(key)) for key in list(self._pending)]
        await asyncio.gather(*(wait_then_load(key, loader) for key, loader in batch))
