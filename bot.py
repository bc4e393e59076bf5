import discord
from discord.ext import commands
from dotenv import load_dotenv
from openai import OpenAI
from config.settings import load_settings
from config.settings import require_credentials
from misc.runtime_wiring import wire_bot_runtime

# =========================
# ENV
# =========================
load_dotenv()


def build_bot(command_prefix: str) -> commands.Bot:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return commands.Bot(command_prefix=command_prefix, intents=intents, help_command=None)


def main() -> None:
    settings, warnings = load_settings()
    require_credentials(settings)

    for warning in warnings:
        print(f"[CFG] {warning}")
    print(
        f"[CFG] assistant={settings.assistant_id} allowed_channels={len(settings.allowed_channel_ids)} "
        f"owners={len(settings.owner_user_ids)} prefix={settings.command_prefix!r} "
        f"config_file={settings.config_path or '(none)'}"
    )
    print(
        f"[CFG] throttle_s={settings.throttle_seconds} busy_retry_s={settings.busy_retry_delay_seconds} "
        f"poll_s={settings.poll_interval_seconds} run_timeout_s={settings.run_timeout_seconds} "
        f"max_polls={settings.max_polls}"
    )

    openai_client = OpenAI(api_key=settings.openai_api_key)

    # =========================
    # DISCORD BOT
    # =========================
    bot = build_bot(settings.command_prefix)
    wire_bot_runtime(bot, settings=settings, openai_client=openai_client)
    bot.run(settings.discord_token)


if __name__ == "__main__":
    main()
