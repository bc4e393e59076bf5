from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import openai

from assistant.errors import BackendError
from assistant.errors import BusyThreadError
from assistant.errors import error_message_text
from assistant.errors import error_status_code
from assistant.errors import is_busy_thread_error

LIST_MESSAGES_LIMIT = 100


@dataclass(slots=True)
class AssistantTurn:
    role: str
    run_id: str | None
    text: str


def _message_text(message: Any) -> str:
    blocks = getattr(message, "content", None) or []
    parts: list[str] = []
    for block in blocks:
        if getattr(block, "type", "text") != "text":
            continue
        text_obj = getattr(block, "text", None)
        value = getattr(text_obj, "value", None)
        if value:
            parts.append(str(value))
    return "\n".join(parts)


class AssistantClient:
    """
    Async facade over the (blocking) OpenAI Assistants thread API.

    Every SDK call runs in a worker thread so the Discord gateway keeps its
    heartbeat while we wait on the backend. SDK exceptions are translated into
    BusyThreadError / BackendError here; nothing above this layer sees openai
    exception types.
    """

    def __init__(self, client: Any, *, assistant_id: str) -> None:
        self._client = client
        self.assistant_id = assistant_id

    @property
    def _threads(self):
        return self._client.beta.threads

    async def _call(self, operation: str, func, *args, **kwargs):
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except openai.OpenAIError as e:
            raise BackendError(operation, error_message_text(e), status_code=error_status_code(e)) from e

    async def create_thread(self) -> str:
        thread = await self._call("create_thread", self._threads.create)
        return str(thread.id)

    async def add_user_message(self, thread_id: str, content: str) -> None:
        try:
            await asyncio.to_thread(
                self._threads.messages.create,
                thread_id=thread_id,
                role="user",
                content=content,
            )
        except openai.OpenAIError as e:
            if is_busy_thread_error(e):
                raise BusyThreadError(thread_id, error_message_text(e)) from e
            raise BackendError("add_user_message", error_message_text(e), status_code=error_status_code(e)) from e

    async def create_run(self, thread_id: str, assistant_id: str | None = None) -> str:
        run = await self._call(
            "create_run",
            self._threads.runs.create,
            thread_id=thread_id,
            assistant_id=assistant_id or self.assistant_id,
        )
        return str(run.id)

    async def retrieve_run_status(self, thread_id: str, run_id: str) -> str:
        run = await self._call(
            "retrieve_run",
            self._threads.runs.retrieve,
            run_id=run_id,
            thread_id=thread_id,
        )
        return str(getattr(run, "status", "") or "").strip().lower()

    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        await self._call(
            "cancel_run",
            self._threads.runs.cancel,
            run_id=run_id,
            thread_id=thread_id,
        )

    async def list_messages(self, thread_id: str) -> list[AssistantTurn]:
        """Thread messages, oldest first."""
        page = await self._call(
            "list_messages",
            self._threads.messages.list,
            thread_id=thread_id,
            order="desc",
            limit=LIST_MESSAGES_LIMIT,
        )
        turns = [
            AssistantTurn(
                role=str(getattr(msg, "role", "") or ""),
                run_id=getattr(msg, "run_id", None),
                text=_message_text(msg),
            )
            for msg in (getattr(page, "data", None) or [])
        ]
        turns.reverse()
        return turns
