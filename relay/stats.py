from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(slots=True)
class RelayStats:
    enqueued: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    busy_retries: int = 0
    gave_up: int = 0
    replies_sent: int = 0
    delivery_failures: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
