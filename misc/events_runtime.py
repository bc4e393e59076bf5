from __future__ import annotations

import discord
from discord.ext import commands
from misc.runtime_deps import RuntimeDeps


def _looks_like_command(bot, content: str) -> bool:
    prefix = getattr(bot, "command_prefix", None)
    if not isinstance(prefix, str) or not prefix:
        return False
    return (content or "").lstrip().startswith(prefix)


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
) -> None:
    @bot.event
    async def on_ready():
        print(f"Relay is online as {bot.user} (channels={len(deps.allowed_channel_ids)})")
        if not deps.dispatcher.running:
            deps.dispatcher.start()

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return

        # Only registered commands are intercepted; anything else with the prefix is relayed.
        if _looks_like_command(bot, message.content):
            ctx = await bot.get_context(message)
            if ctx.valid:
                await bot.invoke(ctx)
                return

        if deps.message_drop_reason(message, deps.allowed_channel_ids) is not None:
            return

        pending = deps.pending_from_message(message)
        depth = deps.dispatcher.enqueue(pending)
        print(f"[Relay] enqueued channel={pending.channel_id} message={pending.message_id} depth={depth}")
