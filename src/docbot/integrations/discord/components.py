from __future__ import annotations

from typing import Any, Optional, Sequence

from ...commands.sources import Choice, ChoicePrompt

DISCORD_BUTTON_STYLE_PRIMARY = 1
DISCORD_BUTTON_STYLE_SECONDARY = 2
DISCORD_BUTTON_STYLE_SUCCESS = 3
DISCORD_BUTTON_STYLE_DANGER = 4
DISCORD_ACTION_ROW_MAX_BUTTONS = 5
DISCORD_SELECT_OPTION_MAX_OPTIONS = 25
DISCORD_COMPONENT_LABEL_MAX_LENGTH = 80
DISCORD_CUSTOM_ID_MAX_LENGTH = 100

COMPONENT_TYPE_ACTION_ROW = 1
COMPONENT_TYPE_BUTTON = 2
COMPONENT_TYPE_STRING_SELECT = 3


def build_action_row(components: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "type": COMPONENT_TYPE_ACTION_ROW,
        "components": components,
    }


def build_button(
    label: str,
    custom_id: str,
    *,
    style: int = DISCORD_BUTTON_STYLE_SECONDARY,
    disabled: bool = False,
) -> dict[str, Any]:
    if len(custom_id) > DISCORD_CUSTOM_ID_MAX_LENGTH:
        raise ValueError(f"custom_id longer than {DISCORD_CUSTOM_ID_MAX_LENGTH}")
    return {
        "type": COMPONENT_TYPE_BUTTON,
        "style": style,
        "label": label[:DISCORD_COMPONENT_LABEL_MAX_LENGTH],
        "custom_id": custom_id,
        "disabled": disabled,
    }


def build_select_menu(
    custom_id: str,
    options: list[dict[str, Any]],
    *,
    placeholder: Optional[str] = None,
    disabled: bool = False,
) -> dict[str, Any]:
    if len(custom_id) > DISCORD_CUSTOM_ID_MAX_LENGTH:
        raise ValueError(f"custom_id longer than {DISCORD_CUSTOM_ID_MAX_LENGTH}")
    select: dict[str, Any] = {
        "type": COMPONENT_TYPE_STRING_SELECT,
        "custom_id": custom_id,
        "options": options[:DISCORD_SELECT_OPTION_MAX_OPTIONS],
        "min_values": 1,
        "max_values": 1,
        "disabled": disabled,
    }
    if placeholder:
        select["placeholder"] = placeholder[:100]
    return select


def build_select_option(
    label: str,
    value: str,
    *,
    description: Optional[str] = None,
) -> dict[str, Any]:
    option: dict[str, Any] = {
        "label": label[:100],
        "value": value[:100],
    }
    if description:
        option["description"] = description[:100]
    return option


def build_choice_buttons(choices: Sequence[Choice]) -> list[dict[str, Any]]:
    """One button per choice, five to an action row."""
    rows: list[dict[str, Any]] = []
    buttons: list[dict[str, Any]] = []
    for choice in choices:
        buttons.append(
            build_button(
                choice.label,
                choice.payload,
                style=DISCORD_BUTTON_STYLE_PRIMARY,
            )
        )
        if len(buttons) == DISCORD_ACTION_ROW_MAX_BUTTONS:
            rows.append(build_action_row(buttons))
            buttons = []
    if buttons:
        rows.append(build_action_row(buttons))
    return rows


def build_choice_menu(
    choices: Sequence[Choice],
    *,
    custom_id: str,
    placeholder: str = "Select a result...",
) -> dict[str, Any]:
    options = [
        build_select_option(
            label=f"{choice.choice_id}: {choice.label}",
            value=str(choice.choice_id),
        )
        for choice in choices[:DISCORD_SELECT_OPTION_MAX_OPTIONS]
    ]
    return build_action_row(
        [build_select_menu(custom_id, options, placeholder=placeholder)]
    )


def build_prompt_components(prompt: ChoicePrompt) -> list[dict[str, Any]]:
    if prompt.as_menu:
        return [build_choice_menu(prompt.choices, custom_id=prompt.menu_payload)]
    return build_choice_buttons(prompt.choices)
