from __future__ import annotations

from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    @bot.command(name="relay.status")
    async def cmd_relay_status(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return
        if not gates.user_is_owner(ctx.author):
            await ctx.send("This command is owner-only.")
            return

        dispatcher = deps.dispatcher
        stats = deps.stats.as_dict() if deps.stats is not None else {}
        channel_id = int(ctx.channel.id)
        thread_id = dispatcher.directory.get(channel_id)
        lines = [
            "Relay status:",
            f"- loop_running={dispatcher.running} queue_depth={dispatcher.queue_depth}",
            f"- threads_mapped={len(dispatcher.directory)} assistant={deps.assistant_id or '(unset)'}",
            f"- this_channel_thread={thread_id or '(none yet)'}",
            "- " + " ".join(f"{k}={v}" for k, v in stats.items()),
        ]
        await ctx.send("```\n" + "\n".join(lines) + "\n```")

