from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass

from config.defaults import TERMINAL_RUN_STATUSES


@dataclass(slots=True)
class RunOutcome:
    run_id: str
    status: str
    polls: int
    gave_up: bool = False

    @property
    def completed(self) -> bool:
        return self.status == "completed" and not self.gave_up


def is_terminal_status(status: str) -> bool:
    return (status or "").strip().lower() in TERMINAL_RUN_STATUSES


async def wait_for_run(
    client,
    thread_id: str,
    run_id: str,
    *,
    poll_interval_seconds: float,
    timeout_seconds: float,
    max_polls: int,
    clock=time.monotonic,
    sleep=asyncio.sleep,
) -> RunOutcome:
    """
    Poll a run until it reaches a terminal status.

    Stops on the first terminal observation, or gives up once the deadline
    passes or max_polls retrievals were made (either bound is off when <= 0).
    """
    deadline = clock() + timeout_seconds if timeout_seconds > 0 else None
    polls = 0
    status = ""
    while True:
        status = await client.retrieve_run_status(thread_id, run_id)
        polls += 1
        if is_terminal_status(status):
            return RunOutcome(run_id=run_id, status=status, polls=polls)

        if max_polls > 0 and polls >= max_polls:
            break
        if deadline is not None and clock() >= deadline:
            break
        await sleep(max(0.0, float(poll_interval_seconds)))

    print(f"[Assistant] gave up waiting thread={thread_id} run={run_id} status={status} polls={polls}")
    return RunOutcome(run_id=run_id, status=status, polls=polls, gave_up=True)
