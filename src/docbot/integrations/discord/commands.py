from __future__ import annotations

from typing import Any, Iterable

from ...commands.base import SlashCommandData, SlashOption

CHAT_INPUT = 1

# Discord application command option types.
STRING = 3
INTEGER = 4
BOOLEAN = 5

_OPTION_TYPES = {
    "string": STRING,
    "integer": INTEGER,
    "boolean": BOOLEAN,
}


def _build_option(option: SlashOption) -> dict[str, Any]:
    return {
        "type": _OPTION_TYPES[option.type],
        "name": option.name,
        "description": option.description,
        "required": option.required,
    }


def build_application_commands(
    slash_commands: Iterable[SlashCommandData],
) -> list[dict[str, Any]]:
    """Translate command schemas into a bulk-overwrite payload.

    Discord rejects optional options listed before required ones, so required
    options are moved to the front.
    """
    payload: list[dict[str, Any]] = []
    for command in slash_commands:
        options = sorted(command.options, key=lambda option: not option.required)
        entry: dict[str, Any] = {
            "type": CHAT_INPUT,
            "name": command.name,
            "description": command.description,
        }
        if options:
            entry["options"] = [_build_option(option) for option in options]
        payload.append(entry)
    return payload
