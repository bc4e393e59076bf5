from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RuntimeDeps:
    dispatcher: Any
    allowed_channel_ids: frozenset[int]
    message_drop_reason: Callable[..., str | None]
    pending_from_message: Callable[[Any], Any]
