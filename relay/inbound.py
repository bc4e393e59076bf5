from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable


@dataclass(slots=True)
class PendingMessage:
    channel_id: Hashable
    author_id: int
    author_is_bot: bool
    content: str
    reply: Callable[[str], Awaitable[Any]]
    message_id: int | None = None


def admit_reason(
    *,
    author_is_bot: bool,
    channel_id: Hashable,
    content: str | None,
    allowed_channel_ids,
) -> str | None:
    """Return why an inbound message is dropped, or None to admit it."""
    if author_is_bot:
        return "bot_author"
    if not (content or "").strip():
        return "empty_content"
    if channel_id not in allowed_channel_ids:
        return "channel_not_allowed"
    return None


def pending_from_message(message: Any) -> PendingMessage:
    author = message.author
    return PendingMessage(
        channel_id=int(message.channel.id),
        author_id=int(getattr(author, "id", 0) or 0),
        author_is_bot=bool(getattr(author, "bot", False)),
        content=message.content or "",
        reply=message.reply,
        message_id=getattr(message, "id", None),
    )
