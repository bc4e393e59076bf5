from __future__ import annotations

import unittest
from types import SimpleNamespace

try:
    from misc.events_runtime import register_runtime_events
except ModuleNotFoundError:
    register_runtime_events = None

from misc.discord_gates import message_drop_reason
from misc.runtime_deps import RuntimeDeps
from relay.inbound import pending_from_message

ALLOWED = frozenset({1202718026353475594})


class _FakeBot:
    command_prefix = "!"

    def __init__(self, commands_known=()):
        self.events: dict = {}
        self.user = SimpleNamespace(id=1)
        self.commands_known = set(commands_known)
        self.invoked: list[str] = []

    def event(self, coro):
        self.events[coro.__name__] = coro
        return coro

    async def get_context(self, message):
        name = (message.content or "").lstrip()[1:].split(" ", 1)[0]
        return SimpleNamespace(valid=name in self.commands_known, name=name)

    async def invoke(self, ctx):
        self.invoked.append(ctx.name)


class _FakeDispatcher:
    def __init__(self):
        self.items: list = []
        self.running = False
        self.started = 0

    def enqueue(self, pending):
        self.items.append(pending)
        return len(self.items)

    def start(self):
        self.started += 1
        self.running = True


def _message(content="hello", *, channel_id=1202718026353475594, bot=False):
    async def _reply(text):
        return None

    return SimpleNamespace(
        id=10,
        guild=SimpleNamespace(id=1),
        channel=SimpleNamespace(id=channel_id),
        author=SimpleNamespace(id=55, bot=bot),
        content=content,
        reply=_reply,
    )


@unittest.skipIf(register_runtime_events is None, "discord.py not installed")
class RuntimeEventsTests(unittest.IsolatedAsyncioTestCase):
    def _wire(self, commands_known=()):
        bot = _FakeBot(commands_known)
        dispatcher = _FakeDispatcher()
        register_runtime_events(
            bot,
            deps=RuntimeDeps(
                dispatcher=dispatcher,
                allowed_channel_ids=ALLOWED,
                message_drop_reason=message_drop_reason,
                pending_from_message=pending_from_message,
            ),
        )
        return bot, dispatcher

    async def test_admitted_message_is_enqueued(self):
        bot, dispatcher = self._wire()
        await bot.events["on_message"](_message("Hello"))

        self.assertEqual(len(dispatcher.items), 1)
        self.assertEqual(dispatcher.items[0].content, "Hello")
        self.assertEqual(dispatcher.items[0].channel_id, 1202718026353475594)

    async def test_filtered_messages_are_not_enqueued(self):
        bot, dispatcher = self._wire()
        await bot.events["on_message"](_message("Hello", bot=True))
        await bot.events["on_message"](_message("   "))
        await bot.events["on_message"](_message("Hello", channel_id=777777777))

        self.assertEqual(dispatcher.items, [])

    async def test_registered_command_is_invoked_not_relayed(self):
        bot, dispatcher = self._wire(commands_known={"relay.status"})
        await bot.events["on_message"](_message("!relay.status"))

        self.assertEqual(bot.invoked, ["relay.status"])
        self.assertEqual(dispatcher.items, [])

    async def test_unknown_prefixed_text_is_relayed(self):
        bot, dispatcher = self._wire(commands_known={"relay.status"})
        await bot.events["on_message"](_message("!important question"))

        self.assertEqual(bot.invoked, [])
        self.assertEqual([p.content for p in dispatcher.items], ["!important question"])

    async def test_arrival_order_is_preserved(self):
        bot, dispatcher = self._wire()
        for i in range(5):
            await bot.events["on_message"](_message(f"m{i}"))

        self.assertEqual([p.content for p in dispatcher.items], [f"m{i}" for i in range(5)])

    async def test_on_ready_starts_dispatcher_once(self):
        bot, dispatcher = self._wire()
        await bot.events["on_ready"]()
        await bot.events["on_ready"]()

        self.assertEqual(dispatcher.started, 1)


if __name__ == "__main__":
    unittest.main()
