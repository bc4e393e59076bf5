from __future__ import annotations

import re

BUSY_THREAD_RE = re.compile(r"can[’']t add messages to thread", flags=re.I)


class RelayError(Exception):
    pass


class BusyThreadError(RelayError):
    """The thread already has an active run; appends are rejected until it ends."""

    def __init__(self, thread_id: str, detail: str = "") -> None:
        self.thread_id = thread_id
        self.detail = detail
        super().__init__(f"thread {thread_id} has an active run: {detail}".rstrip(": "))


class BackendError(RelayError):
    def __init__(self, operation: str, detail: str = "", *, status_code: int | None = None) -> None:
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{operation} failed (status={status_code}): {detail}")


class DeliveryError(RelayError):
    pass


def error_status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def error_message_text(exc: BaseException) -> str:
    parts: list[str] = []
    message = getattr(exc, "message", None)
    if message:
        parts.append(str(message))
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        # openai puts either {"message": ...} or {"error": {"message": ...}} here
        inner = body.get("error") if isinstance(body.get("error"), dict) else body
        if inner.get("message"):
            parts.append(str(inner["message"]))
    parts.append(str(exc))
    return " | ".join(p for p in parts if p)


def is_busy_thread_error(exc: BaseException) -> bool:
    if isinstance(exc, BusyThreadError):
        return True
    if error_status_code(exc) != 400:
        return False
    return bool(BUSY_THREAD_RE.search(error_message_text(exc)))
