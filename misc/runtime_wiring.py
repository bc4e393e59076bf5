from __future__ import annotations

from assistant.client import AssistantClient
from config.settings import RelaySettings
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_relay import register as register_relay
from misc.discord_gates import message_drop_reason
from misc.discord_gates import user_is_owner
from misc.events_runtime import register_runtime_events
from misc.runtime_deps import RuntimeDeps
from relay.dispatch import RelayDispatcher
from relay.inbound import pending_from_message
from relay.stats import RelayStats


def wire_bot_runtime(
    bot,
    *,
    settings: RelaySettings,
    openai_client,
) -> RelayDispatcher:
    allowed_channel_ids = settings.allowed_channel_ids
    owner_user_ids = settings.owner_user_ids

    def in_allowed_channel(ctx) -> bool:
        try:
            return int(ctx.channel.id) in allowed_channel_ids
        except Exception:
            return False

    stats = RelayStats()
    client = AssistantClient(openai_client, assistant_id=settings.assistant_id or "")
    dispatcher = RelayDispatcher.from_settings(client, settings, stats=stats)

    register_relay(
        bot,
        deps=CommandDeps(
            dispatcher=dispatcher,
            stats=stats,
            assistant_id=settings.assistant_id or "",
        ),
        gates=CommandGates(
            in_allowed_channel=in_allowed_channel,
            user_is_owner=lambda user: user_is_owner(user, owner_user_ids),
        ),
    )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            dispatcher=dispatcher,
            allowed_channel_ids=allowed_channel_ids,
            message_drop_reason=message_drop_reason,
            pending_from_message=pending_from_message,
        ),
    )
    return dispatcher
