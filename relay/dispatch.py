from __future__ import annotations

import asyncio

from relay.directory import ConversationDirectory
from relay.handler import MessageHandler
from relay.stats import RelayStats


class RelayDispatcher:
    """
    Single consumer of the inbound FIFO queue.

    Messages are handled strictly one at a time in arrival order, with a
    throttle pause after each. A failure while handling one message is logged
    and dropped; it never stops the loop or re-enqueues the message.
    """

    def __init__(
        self,
        *,
        directory: ConversationDirectory,
        handler: MessageHandler,
        throttle_seconds: float = 1.0,
        stats: RelayStats | None = None,
        sleep=asyncio.sleep,
    ) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()
        self.directory = directory
        self.handler = handler
        self.throttle_seconds = float(throttle_seconds)
        self.stats = stats if stats is not None else handler.stats
        self._sleep = sleep
        self._task: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, client, settings, *, stats: RelayStats | None = None) -> "RelayDispatcher":
        stats = stats if stats is not None else RelayStats()
        directory = ConversationDirectory(client)
        handler = MessageHandler(
            client=client,
            directory=directory,
            allowed_channel_ids=settings.allowed_channel_ids,
            fallbacks=settings.fallbacks,
            busy_retry_delay_seconds=settings.busy_retry_delay_seconds,
            poll_interval_seconds=settings.poll_interval_seconds,
            run_timeout_seconds=settings.run_timeout_seconds,
            max_polls=settings.max_polls,
            stats=stats,
        )
        return cls(
            directory=directory,
            handler=handler,
            throttle_seconds=settings.throttle_seconds,
            stats=stats,
        )

    @property
    def queue_depth(self) -> int:
        return self.queue.qsize()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, pending) -> int:
        self.queue.put_nowait(pending)
        self.stats.enqueued += 1
        return self.queue.qsize()

    async def process_one(self, pending):
        try:
            result = await self.handler.handle(pending)
        except Exception as e:
            self.stats.failed += 1
            print(f"[Relay] error handling message channel={pending.channel_id}: {type(e).__name__}: {e}")
            return None
        if getattr(result, "status", None) == "skipped":
            self.stats.skipped += 1
        else:
            self.stats.processed += 1
        return result

    async def run_forever(self) -> None:
        print("[Relay] dispatch loop started")
        while True:
            pending = await self.queue.get()
            try:
                await self.process_one(pending)
            finally:
                self.queue.task_done()
            await self._sleep(self.throttle_seconds)

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run_forever())
        return self._task

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        print("[Relay] dispatch loop stopped")
