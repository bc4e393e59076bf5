from __future__ import annotations

import asyncio
import importlib
from types import SimpleNamespace

class _DummyThreads:
    def __init__(self):
        self.created = 0
        self.messages = SimpleNamespace(create=self._create_message, list=self._list_messages)
        self.runs = SimpleNamespace(create=self._create_run, retrieve=self._retrieve_run, cancel=self._cancel_run)

    def create(self):
        self.created += 1
        return SimpleNamespace(id=f"thread_{self.created}")

    def _create_message(self, **kwargs):
        return SimpleNamespace(id="msg_1")

    def _create_run(self, **kwargs):
        return SimpleNamespace(id="run_1", status="queued")

    def _retrieve_run(self, **kwargs):
        return SimpleNamespace(id=kwargs["run_id"], status="completed")

    def _cancel_run(self, **kwargs):
        return SimpleNamespace(id=kwargs["run_id"], status="cancelling")

    def _list_messages(self, **kwargs):
        block = SimpleNamespace(type="text", text=SimpleNamespace(value="Smoke reply"))
        return SimpleNamespace(data=[SimpleNamespace(role="assistant", run_id="run_1", content=[block])])


class _DummyClient:
    def __init__(self):
        self.beta = SimpleNamespace(threads=_DummyThreads())


def _try_import_or_skip(module_name: str, pip_name: str | None = None) -> bool:
    try:
        importlib.import_module(module_name)
        return True
    except ModuleNotFoundError:
        install_name = pip_name or module_name
        print(
            f"Smoke wiring check skipped: missing dependency '{module_name}'. "
            f"Install the project and retry (e.g. `pip install {install_name}` "
            f"or `pip install -e .`)."
        )
        return False


async def _relay_one(dispatcher) -> list[str]:
    replies: list[str] = []

    async def _reply(text):
        replies.append(text)

    from relay.inbound import PendingMessage

    dispatcher.enqueue(
        PendingMessage(
            channel_id=123456789012345678,
            author_id=1,
            author_is_bot=False,
            content="Hello",
            reply=_reply,
        )
    )
    await dispatcher.process_one(dispatcher.queue.get_nowait())
    return replies


def _main() -> int:
    if not _try_import_or_skip("discord", "discord.py"):
        return 0

    import discord
    from discord.ext import commands
    from config.settings import RelaySettings
    from misc.runtime_wiring import wire_bot_runtime

    bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
    settings = RelaySettings(
        assistant_id="asst_smoke",
        allowed_channel_ids=frozenset({123456789012345678}),
        owner_user_ids=frozenset({1}),
        throttle_seconds=0.0,
        poll_interval_seconds=0.0,
    )
    dispatcher = wire_bot_runtime(bot, settings=settings, openai_client=_DummyClient())

    expected_commands = {"relay.status"}
    missing = sorted(expected_commands - set(bot.all_commands.keys()))
    if missing:
        raise RuntimeError(f"Missing expected commands: {missing}")

    for name in ("on_ready", "on_message"):
        handler = getattr(bot, name, None)
        if getattr(handler, "__module__", None) != "misc.events_runtime":
            raise RuntimeError(f"Runtime event {name} was not registered")

    replies = asyncio.run(_relay_one(dispatcher))
    if replies != ["Smoke reply"]:
        raise RuntimeError(f"Unexpected relay replies: {replies}")

    print("Smoke wiring check passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
