from __future__ import annotations

import asyncio
from typing import Hashable


class ConversationDirectory:
    """Channel id -> assistant thread id, created lazily on first contact."""

    def __init__(self, client) -> None:
        self._client = client
        self._threads: dict[Hashable, str] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._threads)

    def __contains__(self, channel_id: Hashable) -> bool:
        return channel_id in self._threads

    def get(self, channel_id: Hashable) -> str | None:
        return self._threads.get(channel_id)

    def snapshot(self) -> dict[Hashable, str]:
        return dict(self._threads)

    async def resolve_or_create(self, channel_id: Hashable) -> str:
        existing = self._threads.get(channel_id)
        if existing is not None:
            return existing

        async with self._lock:
            existing = self._threads.get(channel_id)
            if existing is not None:
                return existing
            thread_id = await self._client.create_thread()
            self._threads[channel_id] = thread_id
        print(f"[Relay] created thread={thread_id} channel={channel_id}")
        return thread_id
