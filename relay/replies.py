from __future__ import annotations

from assistant.errors import DeliveryError
from config.defaults import DISCORD_MAX_MESSAGE_LEN
from config.settings import FallbackTexts


def select_run_reply(turns, run_id: str) -> str | None:
    """Latest assistant turn produced by this run; older runs' replies are ignored."""
    matching = [t for t in turns if t.role == "assistant" and t.run_id == run_id]
    if not matching:
        return None
    return matching[-1].text or None


def shape_reply(
    candidate: str | None,
    *,
    fallbacks: FallbackTexts,
    limit: int = DISCORD_MAX_MESSAGE_LEN,
) -> str:
    # Length check runs on the final string, after the no-reply substitution.
    text = candidate if candidate else fallbacks.no_reply
    if len(text) > limit:
        return fallbacks.too_long
    return text


async def deliver_reply(pending, text: str) -> None:
    try:
        await pending.reply(text)
    except Exception as e:
        raise DeliveryError(f"reply to channel={pending.channel_id} message={pending.message_id} failed: {e}") from e
