from __future__ import annotations

# Channels the relay listens in when RELAY_ALLOWED_CHANNEL_IDS is unset.
DEFAULT_ALLOWED_CHANNEL_IDS: set[int] = {
    1202718026353475594,
    1202718036797161482,
    1202718047807340574,
    1202718056254668840,
    1202718080191434823,
    1202718088554876928,
    1202718095571947610,
    1202718104077992006,
    1202718112902938684,
    1202718133153169508,
    1202718143185690666,
    1202718152631255130,
    1202718159816228874,
    1202718167080894495,
    1202718186693201970,
    1202718194700128356,
    1202718208025427988,
    1202718218829963265,
    1202718230259703819,
    1202718241294913556,
    1202718258332045452,
    1202718267009929236,
    1210671658772332615,
    1210671699390107718,
    1210671746143879178,
    1210671777907474452,
    1210671826972180500,
    1217178700840308736,
    1217180372098355360,
    1224593438608068618,
    1224748315296403536,
}

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_CONFIG_FILENAME = "relay.yml"

# Seconds
DEFAULT_THROTTLE_SECONDS = 1.0
DEFAULT_BUSY_RETRY_DELAY_SECONDS = 2.0
DEFAULT_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_RUN_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_POLLS = 120

MAX_BUSY_RETRIES = 1

DISCORD_MAX_MESSAGE_LEN = 2000  # hard platform limit

TERMINAL_RUN_STATUSES = frozenset({"cancelled", "failed", "completed", "expired"})

FALLBACK_NO_REPLY = (
    "Sorry, I didn't catch that. Could you do me a solid and send your message again? Thanks so much!"
)
FALLBACK_TOO_LONG = (
    "Hmm, my response is too long for Discord. Could you try breaking your message into smaller parts? "
    "I have a great memory so just ask me to take things one paragraph at a time!"
)
FALLBACK_TIMEOUT = (
    "Sorry, that one took me too long to think through. Could you send it again in a moment?"
)
