from __future__ import annotations

from relay.inbound import admit_reason


def message_drop_reason(message, allowed_channel_ids) -> str | None:
    author = getattr(message, "author", None)
    channel = getattr(message, "channel", None)
    return admit_reason(
        author_is_bot=bool(getattr(author, "bot", False)),
        channel_id=int(getattr(channel, "id", 0) or 0),
        content=getattr(message, "content", None),
        allowed_channel_ids=allowed_channel_ids,
    )


def user_is_owner(user, owner_user_ids) -> bool:
    uid = int(getattr(user, "id", 0) or 0)
    return bool(uid) and uid in owner_user_ids
