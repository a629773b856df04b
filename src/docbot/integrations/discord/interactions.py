"""Field extraction for raw gateway payloads.

Discord sends loosely shaped JSON; every helper returns ``None`` (or an
empty container) instead of raising when a field is missing or mistyped.
"""

from __future__ import annotations

from typing import Any, Optional

from .constants import (
    INTERACTION_TYPE_APPLICATION_COMMAND,
    INTERACTION_TYPE_MESSAGE_COMPONENT,
)


def _as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def _data(interaction_payload: dict[str, Any]) -> dict[str, Any]:
    data = interaction_payload.get("data")
    return data if isinstance(data, dict) else {}


def extract_command_name_and_options(
    interaction_payload: dict[str, Any],
) -> tuple[Optional[str], dict[str, Any]]:
    data = _data(interaction_payload)
    name = data.get("name")
    if not isinstance(name, str) or not name:
        return None, {}

    parsed_options: dict[str, Any] = {}
    options = data.get("options")
    for item in options if isinstance(options, list) else []:
        if not isinstance(item, dict):
            continue
        option_name = item.get("name")
        if not isinstance(option_name, str) or not option_name:
            continue
        parsed_options[option_name] = item.get("value")
    return name, parsed_options


def extract_interaction_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("id"))


def extract_interaction_token(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("token"))


def extract_channel_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("channel_id"))


def extract_guild_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("guild_id"))


def extract_user_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    member = interaction_payload.get("member")
    if isinstance(member, dict):
        member_user = member.get("user")
        if isinstance(member_user, dict):
            user_id = _as_id(member_user.get("id"))
            if user_id:
                return user_id
    user = interaction_payload.get("user")
    if isinstance(user, dict):
        return _as_id(user.get("id"))
    return None


def is_application_command(interaction_payload: dict[str, Any]) -> bool:
    return interaction_payload.get("type") == INTERACTION_TYPE_APPLICATION_COMMAND


def is_component_interaction(interaction_payload: dict[str, Any]) -> bool:
    return interaction_payload.get("type") == INTERACTION_TYPE_MESSAGE_COMPONENT


def extract_component_type(interaction_payload: dict[str, Any]) -> Optional[int]:
    component_type = _data(interaction_payload).get("component_type")
    if isinstance(component_type, bool) or not isinstance(component_type, int):
        return None
    return component_type


def extract_component_custom_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(_data(interaction_payload).get("custom_id"))


def extract_component_values(interaction_payload: dict[str, Any]) -> list[str]:
    values = _data(interaction_payload).get("values")
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if isinstance(v, (str, int, float))]


def extract_message_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    message = interaction_payload.get("message")
    if not isinstance(message, dict):
        return None
    return _as_id(message.get("id"))


def extract_message_fields(
    message_payload: dict[str, Any],
) -> Optional[tuple[str, str, str, str]]:
    """Return ``(author_id, channel_id, message_id, content)`` for MESSAGE_CREATE.

    Messages written by bots (including this one) and payloads missing any of
    the fields yield ``None``.
    """
    author = message_payload.get("author")
    if not isinstance(author, dict) or author.get("bot"):
        return None
    author_id = _as_id(author.get("id"))
    channel_id = _as_id(message_payload.get("channel_id"))
    message_id = _as_id(message_payload.get("id"))
    content = message_payload.get("content")
    if not author_id or not channel_id or not message_id:
        return None
    if not isinstance(content, str):
        return None
    return author_id, channel_id, message_id, content
