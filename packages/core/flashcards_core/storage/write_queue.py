"""Fixed-size background queue for deck record writes."""

import asyncio
from collections.abc import Awaitable, Callable

from flashcards_core.schemas.decks import Deck
from flashcards_core.utils.logging import get_logger, log_exceptions

logger = get_logger(__name__)

DEFAULT_WORKERS = 4


class DeckWriteQueue:
    """Apply deck writes on a fixed pool of asyncio workers.

    Each deck id is pinned to one worker, so writes for the same deck land
    in the order they were submitted while different decks write in
    parallel. Submitting never waits for the write itself, and ``pending``
    exposes the latest record still waiting to be written for a deck.
    """

    def __init__(
        self,
        write: Callable[[Deck], Awaitable[None]],
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._write = log_exceptions(logger)(write)
        self._size = workers
        self._queues: list[asyncio.Queue[Deck]] = []
        self._tasks: list[asyncio.Task[None]] = []
        self._latest: dict[int, Deck] = {}
        self._queued: dict[int, int] = {}
        self.failed_writes = 0

    @property
    def started(self) -> bool:
        return bool(self._tasks)

    def start(self) -> None:
        """Spawn the workers on the running event loop."""
        if self.started:
            return
        self._queues = [asyncio.Queue() for _ in range(self._size)]
        self._tasks = [
            asyncio.create_task(self._worker(queue)) for queue in self._queues
        ]
        logger.debug(f"Started deck write queue with {self._size} workers")

    def submit(self, deck: Deck) -> None:
        """Queue a copy of ``deck`` for writing."""
        if not self.started:
            self.start()
        record = deck.model_copy()
        self._latest[deck.id] = record
        self._queued[deck.id] = self._queued.get(deck.id, 0) + 1
        self._queues[deck.id % self._size].put_nowait(record)

    def pending(self, deck_id: int) -> Deck | None:
        """Latest submitted record for ``deck_id`` not yet written, if any."""
        record = self._latest.get(deck_id)
        return record.model_copy() if record else None

    async def join(self) -> None:
        """Wait until every submitted write has been attempted."""
        await asyncio.gather(*(queue.join() for queue in self._queues))

    async def close(self) -> None:
        """Drain pending writes and stop the workers."""
        if not self.started:
            return
        await self.join()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self._queues = []

    async def _worker(self, queue: asyncio.Queue[Deck]) -> None:
        while True:
            deck = await queue.get()
            try:
                await self._write(deck)
            except Exception:
                # Logged by log_exceptions; keep the worker alive for later writes
                self.failed_writes += 1
            finally:
                self._settle(deck.id)
                queue.task_done()

    def _settle(self, deck_id: int) -> None:
        remaining = self._queued[deck_id] - 1
        if remaining:
            self._queued[deck_id] = remaining
        else:
            del self._queued[deck_id]
            del self._latest[deck_id]
