from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable

if TYPE_CHECKING:
    from relay.dispatch import RelayDispatcher
    from relay.stats import RelayStats


def _deny(_subject: Any) -> bool:
    return False


@dataclass(frozen=True)
class CommandDeps:
    dispatcher: RelayDispatcher
    stats: RelayStats | None = None
    assistant_id: str = ""


@dataclass(frozen=True)
class CommandGates:
    """Channel and caller checks shared by the operator commands."""

    in_allowed_channel: Callable[[Any], bool] = _deny
    user_is_owner: Callable[[Any], bool] = _deny
