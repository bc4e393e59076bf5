from __future__ import annotations

import asyncio
from dataclasses import dataclass

from assistant.errors import BackendError
from assistant.errors import BusyThreadError
from assistant.errors import DeliveryError
from assistant.runs import wait_for_run
from config.defaults import MAX_BUSY_RETRIES
from config.settings import FallbackTexts
from relay.replies import deliver_reply
from relay.replies import select_run_reply
from relay.replies import shape_reply
from relay.stats import RelayStats


@dataclass(slots=True)
class HandleResult:
    status: str  # "replied" | "delivery_failed" | "skipped"
    thread_id: str | None = None
    run_id: str | None = None
    run_status: str | None = None
    append_attempts: int = 0
    reply_text: str | None = None


class MessageHandler:
    """
    One conversation turn: thread -> append -> run -> poll -> reply.

    A busy thread (another run still active) gets exactly one delayed retry of
    the append; a second BusyThreadError is raised to the caller. Every other
    backend error is raised on first sight.
    """

    def __init__(
        self,
        *,
        client,
        directory,
        allowed_channel_ids,
        fallbacks: FallbackTexts | None = None,
        busy_retry_delay_seconds: float = 2.0,
        max_busy_retries: int = MAX_BUSY_RETRIES,
        poll_interval_seconds: float = 1.0,
        run_timeout_seconds: float = 120.0,
        max_polls: int = 120,
        stats: RelayStats | None = None,
        sleep=asyncio.sleep,
    ) -> None:
        self.client = client
        self.directory = directory
        self.allowed_channel_ids = allowed_channel_ids
        self.fallbacks = fallbacks or FallbackTexts()
        self.busy_retry_delay_seconds = float(busy_retry_delay_seconds)
        self.max_busy_retries = max(0, int(max_busy_retries))
        self.poll_interval_seconds = float(poll_interval_seconds)
        self.run_timeout_seconds = float(run_timeout_seconds)
        self.max_polls = int(max_polls)
        self.stats = stats if stats is not None else RelayStats()
        self._sleep = sleep

    async def _append_with_retry(self, thread_id: str, content: str) -> int:
        attempt = 0
        while True:
            try:
                await self.client.add_user_message(thread_id, content)
                return attempt + 1
            except BusyThreadError:
                if attempt >= self.max_busy_retries:
                    print(f"[Relay] thread still busy after retry thread={thread_id}; dropping message")
                    raise
                attempt += 1
                self.stats.busy_retries += 1
                print(
                    f"[Relay] active run on thread={thread_id}; retrying in "
                    f"{self.busy_retry_delay_seconds}s (attempt={attempt})"
                )
                await self._sleep(self.busy_retry_delay_seconds)

    async def _best_effort_cancel(self, thread_id: str, run_id: str) -> None:
        try:
            await self.client.cancel_run(thread_id, run_id)
        except BackendError as e:
            print(f"[Relay] cancel failed thread={thread_id} run={run_id}: {e}")

    async def handle(self, pending) -> HandleResult:
        if pending.channel_id not in self.allowed_channel_ids:
            print(f"[Relay] skip channel={pending.channel_id} (not allowed)")
            return HandleResult(status="skipped")

        thread_id = await self.directory.resolve_or_create(pending.channel_id)
        print(f"[Relay] sending channel={pending.channel_id} thread={thread_id} chars={len(pending.content)}")
        attempts = await self._append_with_retry(thread_id, pending.content)

        run_id = await self.client.create_run(thread_id, self.client.assistant_id)
        outcome = await wait_for_run(
            self.client,
            thread_id,
            run_id,
            poll_interval_seconds=self.poll_interval_seconds,
            timeout_seconds=self.run_timeout_seconds,
            max_polls=self.max_polls,
            sleep=self._sleep,
        )

        if outcome.gave_up:
            self.stats.gave_up += 1
            await self._best_effort_cancel(thread_id, run_id)
            text = shape_reply(self.fallbacks.timeout, fallbacks=self.fallbacks)
        elif outcome.completed:
            turns = await self.client.list_messages(thread_id)
            text = shape_reply(select_run_reply(turns, run_id), fallbacks=self.fallbacks)
        else:
            print(f"[Relay] run ended status={outcome.status} thread={thread_id} run={run_id}")
            text = shape_reply(None, fallbacks=self.fallbacks)

        result = HandleResult(
            status="replied",
            thread_id=thread_id,
            run_id=run_id,
            run_status=outcome.status,
            append_attempts=attempts,
            reply_text=text,
        )
        print(f"[Relay] replying channel={pending.channel_id} run={run_id} chars={len(text)}")
        try:
            await deliver_reply(pending, text)
        except DeliveryError as e:
            self.stats.delivery_failures += 1
            print(f"[Relay] {e}")
            result.status = "delivery_failed"
            return result

        self.stats.replies_sent += 1
        return result
