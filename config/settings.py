from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from config.defaults import DEFAULT_ALLOWED_CHANNEL_IDS
from config.defaults import DEFAULT_BUSY_RETRY_DELAY_SECONDS
from config.defaults import DEFAULT_COMMAND_PREFIX
from config.defaults import DEFAULT_CONFIG_FILENAME
from config.defaults import DEFAULT_MAX_POLLS
from config.defaults import DEFAULT_POLL_INTERVAL_SECONDS
from config.defaults import DEFAULT_RUN_TIMEOUT_SECONDS
from config.defaults import DEFAULT_THROTTLE_SECONDS
from config.defaults import DISCORD_MAX_MESSAGE_LEN
from config.defaults import FALLBACK_NO_REPLY
from config.defaults import FALLBACK_TIMEOUT
from config.defaults import FALLBACK_TOO_LONG


@dataclass(frozen=True)
class FallbackTexts:
    no_reply: str = FALLBACK_NO_REPLY
    too_long: str = FALLBACK_TOO_LONG
    timeout: str = FALLBACK_TIMEOUT


@dataclass(frozen=True)
class RelaySettings:
    discord_token: str | None = None
    openai_api_key: str | None = None
    assistant_id: str | None = None
    allowed_channel_ids: frozenset[int] = frozenset(DEFAULT_ALLOWED_CHANNEL_IDS)
    owner_user_ids: frozenset[int] = frozenset()
    command_prefix: str = DEFAULT_COMMAND_PREFIX
    throttle_seconds: float = DEFAULT_THROTTLE_SECONDS
    busy_retry_delay_seconds: float = DEFAULT_BUSY_RETRY_DELAY_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    run_timeout_seconds: float = DEFAULT_RUN_TIMEOUT_SECONDS
    max_polls: int = DEFAULT_MAX_POLLS
    fallbacks: FallbackTexts = field(default_factory=FallbackTexts)
    config_path: str | None = None


def parse_id_set(raw: str | None) -> set[int]:
    if not raw:
        return set()
    out: set[int] = set()
    for tok in re.split(r"[\s,;]+", raw.strip()):
        if not tok:
            continue
        if re.fullmatch(r"\d{8,22}", tok):
            out.add(int(tok))
    return out


def default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), DEFAULT_CONFIG_FILENAME)


def _env_float(env: Mapping[str, str], name: str, default: float, warnings: list[str]) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return float(default)
    try:
        value = float(raw)
    except ValueError:
        warnings.append(f"invalid {name}={raw!r}; using {default}")
        return float(default)
    if not math.isfinite(value):
        warnings.append(f"non-finite {name}={raw!r}; using {default}")
        return float(default)
    if value < 0:
        warnings.append(f"negative {name}={raw!r}; using {default}")
        return float(default)
    return value


def _env_int(env: Mapping[str, str], name: str, default: int, warnings: list[str]) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        warnings.append(f"invalid {name}={raw!r}; using {default}")
        return int(default)


def _yaml_id_set(value: Any) -> set[int]:
    if isinstance(value, (list, tuple, set)):
        return parse_id_set(" ".join(str(v) for v in value))
    if isinstance(value, (str, int)):
        return parse_id_set(str(value))
    return set()


def load_file_overrides(path: str | Path | None) -> tuple[dict[str, Any], str | None]:
    """
    Read the optional YAML overrides file.

    Returns (payload, warning_message). A missing file is not a warning when no
    explicit path was configured; the caller decides that.
    """
    if not path:
        return ({}, None)
    p = Path(path)
    if not p.exists():
        return ({}, f"relay config not found at {p}; using defaults")
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as exc:
        return ({}, f"failed to read relay config from {p}: {exc}; using defaults")
    if payload is None:
        return ({}, None)
    if not isinstance(payload, dict):
        return ({}, f"invalid relay config format in {p}; using defaults")
    return (payload, None)


def _resolve_fallbacks(raw: Any, warnings: list[str]) -> FallbackTexts:
    defaults = FallbackTexts()
    if raw is None:
        return defaults
    if not isinstance(raw, dict):
        warnings.append("fallbacks must be a mapping; using built-in fallback texts")
        return defaults

    resolved: dict[str, str] = {}
    for key in ("no_reply", "too_long", "timeout"):
        text = str(raw.get(key) or "").strip()
        if not text:
            continue
        # A fallback must itself be deliverable.
        if len(text) > DISCORD_MAX_MESSAGE_LEN:
            warnings.append(
                f"fallbacks.{key} is {len(text)} chars (limit {DISCORD_MAX_MESSAGE_LEN}); using built-in text"
            )
            continue
        resolved[key] = text
    return replace(defaults, **resolved)


def load_settings(environ: Mapping[str, str] | None = None) -> tuple[RelaySettings, list[str]]:
    """
    Build settings from defaults, the YAML overrides file, then env vars.

    Bad optional values never raise; they fall back to defaults and are
    reported in the returned warnings list.
    """
    env = os.environ if environ is None else environ
    warnings: list[str] = []

    explicit_path = (env.get("RELAY_CONFIG_PATH") or "").strip()
    config_path = explicit_path or default_config_path()
    if explicit_path or os.path.exists(config_path):
        payload, warning = load_file_overrides(config_path)
        if warning:
            warnings.append(warning)
    else:
        payload = {}

    allowed = set(DEFAULT_ALLOWED_CHANNEL_IDS)
    file_ids = _yaml_id_set(payload.get("allowed_channel_ids"))
    if file_ids:
        allowed = file_ids
    env_ids = parse_id_set(env.get("RELAY_ALLOWED_CHANNEL_IDS"))
    if env_ids:
        allowed = env_ids

    max_polls = _env_int(env, "RELAY_MAX_POLLS", DEFAULT_MAX_POLLS, warnings)
    prefix = (env.get("RELAY_COMMAND_PREFIX") or "").strip() or DEFAULT_COMMAND_PREFIX

    settings = RelaySettings(
        discord_token=(env.get("DISCORD_TOKEN") or "").strip() or None,
        openai_api_key=(env.get("OPENAI_API_KEY") or "").strip() or None,
        assistant_id=(env.get("ASSISTANT_ID") or "").strip() or None,
        allowed_channel_ids=frozenset(allowed),
        owner_user_ids=frozenset(parse_id_set(env.get("RELAY_OWNER_USER_IDS"))),
        command_prefix=prefix,
        throttle_seconds=_env_float(env, "RELAY_THROTTLE_SECONDS", DEFAULT_THROTTLE_SECONDS, warnings),
        busy_retry_delay_seconds=_env_float(
            env, "RELAY_BUSY_RETRY_DELAY_SECONDS", DEFAULT_BUSY_RETRY_DELAY_SECONDS, warnings
        ),
        poll_interval_seconds=_env_float(
            env, "RELAY_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS, warnings
        ),
        run_timeout_seconds=_env_float(env, "RELAY_RUN_TIMEOUT_SECONDS", DEFAULT_RUN_TIMEOUT_SECONDS, warnings),
        max_polls=max_polls,
        fallbacks=_resolve_fallbacks(payload.get("fallbacks"), warnings),
        config_path=config_path if payload else None,
    )
    return (settings, warnings)


def require_credentials(settings: RelaySettings) -> None:
    if not settings.discord_token:
        raise RuntimeError("Missing DISCORD_TOKEN env var")
    if not settings.openai_api_key:
        raise RuntimeError("Missing OPENAI_API_KEY env var")
    if not settings.assistant_id:
        raise RuntimeError("Missing ASSISTANT_ID env var")
