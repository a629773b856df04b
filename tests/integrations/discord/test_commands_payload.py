from __future__ import annotations

from docbot.commands import SlashCommandData, SlashOption
from docbot.commands.doc import DOC_SLASH_COMMAND
from docbot.integrations.discord.commands import (
    BOOLEAN,
    CHAT_INPUT,
    INTEGER,
    STRING,
    build_application_commands,
)


def test_doc_command_payload() -> None:
    (command,) = build_application_commands([DOC_SLASH_COMMAND])

    assert command["type"] == CHAT_INPUT
    assert command["name"] == "doc"
    assert [(o["name"], o["type"], o["required"]) for o in command["options"]] == [
        ("query", STRING, True),
        ("long", BOOLEAN, False),
        ("omit-tags", BOOLEAN, False),
    ]


def test_required_options_are_listed_first() -> None:
    data = SlashCommandData(
        name="pick",
        description="Pick one",
        options=(
            SlashOption("boolean", "verbose", "Verbose output"),
            SlashOption("integer", "index", "Which one", required=True),
        ),
    )

    (command,) = build_application_commands([data])

    assert [o["name"] for o in command["options"]] == ["index", "verbose"]
    assert command["options"][0]["type"] == INTEGER


def test_command_without_options_has_no_options_key() -> None:
    (command,) = build_application_commands(
        [SlashCommandData(name="ping", description="Ping")]
    )
    assert "options" not in command
