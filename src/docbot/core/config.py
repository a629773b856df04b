from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import PermanentError

logger = logging.getLogger("docbot.core.config")

CONFIG_FILENAME = "docbot.yml"
DEFAULT_BOT_TOKEN_ENV = "DOCBOT_DISCORD_BOT_TOKEN"
DEFAULT_APP_ID_ENV = "DOCBOT_DISCORD_APP_ID"
DEFAULT_COMMAND_SCOPE = "guild"
DEFAULT_INTERACTION_TTL_SECONDS = 15 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 60
DEFAULT_MAX_MESSAGE_LENGTH = 2000
DEFAULT_LOG_PATH = "logs/docbot.log"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3


class ConfigError(PermanentError):
    """Raised when the bot configuration is invalid."""


@dataclass(frozen=True)
class LogConfig:
    path: Path
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT


@dataclass(frozen=True)
class CommandRegistration:
    enabled: bool
    scope: str
    guild_ids: tuple[str, ...]


@dataclass(frozen=True)
class BotConfig:
    root: Path
    enabled: bool
    bot_token_env: str
    app_id_env: str
    bot_token: Optional[str]
    application_id: Optional[str]
    message_prefix: str
    interaction_ttl_seconds: float
    sweep_interval_seconds: float
    max_message_length: int
    command_registration: CommandRegistration
    log: LogConfig
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_raw(cls, *, root: Path, raw: Any) -> "BotConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        enabled = _parse_bool_or_default(cfg.get("enabled"), default=True, key="enabled")
        bot_token_env = str(cfg.get("bot_token_env", DEFAULT_BOT_TOKEN_ENV)).strip()
        app_id_env = str(cfg.get("app_id_env", DEFAULT_APP_ID_ENV)).strip()
        if not bot_token_env:
            raise ConfigError("bot_token_env must be non-empty")
        if not app_id_env:
            raise ConfigError("app_id_env must be non-empty")

        bot_token = os.environ.get(bot_token_env) or None
        application_id = os.environ.get(app_id_env) or None

        prefix_value = cfg.get("message_prefix", "")
        if prefix_value is None:
            prefix_value = ""
        if not isinstance(prefix_value, str):
            raise ConfigError("message_prefix must be a string")

        registration_raw = cfg.get("command_registration")
        registration_cfg = (
            registration_raw if isinstance(registration_raw, dict) else {}
        )
        scope = str(registration_cfg.get("scope", DEFAULT_COMMAND_SCOPE)).strip().lower()
        if scope not in {"global", "guild"}:
            raise ConfigError("command_registration.scope must be 'global' or 'guild'")
        command_registration = CommandRegistration(
            enabled=_parse_bool_or_default(
                registration_cfg.get("enabled"),
                default=True,
                key="command_registration.enabled",
            ),
            scope=scope,
            guild_ids=tuple(_parse_string_ids(registration_cfg.get("guild_ids"))),
        )

        max_message_length = _parse_positive_int_or_default(
            cfg.get("max_message_length"),
            default=DEFAULT_MAX_MESSAGE_LENGTH,
            key="max_message_length",
        )

        log_raw = cfg.get("log")
        log_cfg = log_raw if isinstance(log_raw, dict) else {}
        log_path_value = log_cfg.get("path", DEFAULT_LOG_PATH)
        if not isinstance(log_path_value, str) or not log_path_value.strip():
            raise ConfigError("log.path must be a string path")
        log = LogConfig(
            path=(root / log_path_value).resolve(),
            max_bytes=_parse_positive_int_or_default(
                log_cfg.get("max_bytes"),
                default=DEFAULT_LOG_MAX_BYTES,
                key="log.max_bytes",
            ),
            backup_count=_parse_positive_int_or_default(
                log_cfg.get("backup_count"),
                default=DEFAULT_LOG_BACKUP_COUNT,
                key="log.backup_count",
            ),
        )

        return cls(
            root=root,
            enabled=enabled,
            bot_token_env=bot_token_env,
            app_id_env=app_id_env,
            bot_token=bot_token,
            application_id=application_id,
            message_prefix=prefix_value,
            interaction_ttl_seconds=_parse_positive_float_or_default(
                cfg.get("interaction_ttl_seconds"),
                default=DEFAULT_INTERACTION_TTL_SECONDS,
                key="interaction_ttl_seconds",
            ),
            sweep_interval_seconds=_parse_positive_float_or_default(
                cfg.get("sweep_interval_seconds"),
                default=DEFAULT_SWEEP_INTERVAL_SECONDS,
                key="sweep_interval_seconds",
            ),
            max_message_length=min(max_message_length, DEFAULT_MAX_MESSAGE_LENGTH),
            command_registration=command_registration,
            log=log,
            raw=cfg,
        )


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data


def load_dotenv_for_root(root: Path) -> None:
    """Best-effort load of ``.env`` from the config root."""
    try:
        candidate = root.resolve() / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=candidate, override=True)
    except OSError as exc:
        logger.debug("Failed to load .env file: %s", exc)


def find_config_path(start: Path) -> Optional[Path]:
    start = start.resolve()
    if start.is_file():
        return start
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_bot_config(start: Path) -> BotConfig:
    """Load ``docbot.yml`` from ``start`` or its nearest parent.

    A missing file yields the defaults rooted at ``start``.
    """
    config_path = find_config_path(start)
    root = config_path.parent if config_path is not None else start.resolve()
    load_dotenv_for_root(root)
    data = _load_yaml_dict(config_path) if config_path is not None else {}
    return BotConfig.from_raw(root=root, raw=data)


def _parse_string_ids(value: Any) -> list[str]:
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    parsed: list[str] = []
    for item in items:
        token = str(item).strip()
        if token:
            parsed.append(token)
    return parsed


def _parse_positive_int_or_default(value: Any, *, default: int, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer") from exc
    if parsed <= 0:
        return default
    return parsed


def _parse_positive_float_or_default(value: Any, *, default: float, key: str) -> float:
    if value is None:
        return float(default)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number") from exc
    if parsed <= 0:
        return float(default)
    return parsed


def _parse_bool_or_default(value: Any, *, default: bool, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be a boolean")
