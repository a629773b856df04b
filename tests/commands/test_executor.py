from __future__ import annotations

import logging
from typing import Any, Optional

import pytest

from docbot.commands import (
    ButtonCommandSource,
    Command,
    CommandContext,
    CommandRegistrationError,
    Executor,
    MessageCommandSource,
    SlashCommandData,
    SlashCommandSource,
)
from docbot.commands.executor import INVALID_ARGUMENTS_MESSAGE, UNEXPECTED_ERROR_MESSAGE
from docbot.parsers import Parser, integer, token


class _EchoCommand(Command):
    def __init__(self, name: str, keyword: str) -> None:
        self.name = name
        self._keyword = keyword
        self.calls: list[tuple[str, Any]] = []

    def keyword(self) -> Optional[Parser[Any]]:
        return token(self._keyword)

    def slash_data(self) -> SlashCommandData:
        return SlashCommandData(name=self.name, description=f"{self.name} command")

    async def handle_message(self, context, source, sender) -> None:
        self.calls.append(("message", context.remaining_text.strip()))
        await sender.reply(f"{self.name}:{context.match}")

    async def handle_slash(self, context, source, sender) -> None:
        self.calls.append(("slash", dict(source.options)))

    async def handle_button(self, context, source, sender) -> None:
        self.calls.append(("button", context.shift(integer())))


class _FailingCommand(Command):
    name = "boom"

    def keyword(self) -> Parser[Any]:
        return token("boom")

    async def handle_message(self, context, source, sender) -> None:
        raise RuntimeError("kaput")


def _message(text: str, author: str = "u1") -> MessageCommandSource:
    return MessageCommandSource(
        author_id=author, channel_id="c1", message_id="m1", text=text
    )


def _button(custom_id: str) -> ButtonCommandSource:
    return ButtonCommandSource(
        author_id="u1",
        channel_id="c1",
        interaction_id="i1",
        interaction_token="t1",
        custom_id=custom_id,
    )


@pytest.mark.anyio
async def test_first_matching_keyword_wins(sender) -> None:
    first = _EchoCommand("first", "doc")
    second = _EchoCommand("second", "doc")
    executor = Executor([first, second])

    handled = await executor.dispatch_message(_message("doc String"), sender)

    assert handled
    assert first.calls == [("message", "String")]
    assert second.calls == []
    assert sender.contents == ["first:doc"]


@pytest.mark.anyio
async def test_unmatched_message_is_ignored(sender) -> None:
    command = _EchoCommand("doc", "doc")
    executor = Executor([command])

    assert not await executor.dispatch_message(_message("hello there"), sender)
    assert command.calls == []
    assert sender.sent == []


@pytest.mark.anyio
async def test_slash_routes_by_name(sender) -> None:
    command = _EchoCommand("doc", "doc")
    executor = Executor([command])
    source = SlashCommandSource(
        author_id="u1",
        channel_id="c1",
        interaction_id="i1",
        interaction_token="t1",
        command_name="doc",
        options={"query": "String"},
    )

    assert await executor.dispatch_slash(source, sender)
    assert command.calls == [("slash", {"query": "String"})]


@pytest.mark.anyio
async def test_unknown_slash_name_is_ignored(sender) -> None:
    executor = Executor([_EchoCommand("doc", "doc")])
    source = SlashCommandSource(
        author_id="u1",
        channel_id="c1",
        interaction_id="i1",
        interaction_token="t1",
        command_name="missing",
    )
    assert not await executor.dispatch_slash(source, sender)


@pytest.mark.anyio
async def test_component_routes_by_first_word(sender) -> None:
    command = _EchoCommand("doc", "doc")
    executor = Executor([command])

    assert await executor.dispatch_component(_button("doc 3 abc"), sender)
    assert not await executor.dispatch_component(_button("other 3 abc"), sender)
    assert command.calls == [("button", 3)]


@pytest.mark.anyio
async def test_parse_error_replies_with_reason(sender) -> None:
    executor = Executor([_EchoCommand("doc", "doc")])

    await executor.dispatch_component(_button("doc notanumber abc"), sender)

    assert sender.last.content == INVALID_ARGUMENTS_MESSAGE.format(
        reason="expected a number"
    )
    assert sender.last.ephemeral


@pytest.mark.anyio
async def test_unexpected_error_is_logged_and_answered(sender, caplog) -> None:
    executor = Executor([_FailingCommand()])

    with caplog.at_level(logging.ERROR):
        handled = await executor.dispatch_message(_message("boom"), sender)

    assert handled
    assert sender.contents == [UNEXPECTED_ERROR_MESSAGE]
    assert any("docbot.command.unhandled_error" in r.message for r in caplog.records)


def test_duplicate_names_are_rejected() -> None:
    executor = Executor([_EchoCommand("doc", "doc")])
    with pytest.raises(CommandRegistrationError):
        executor.register(_EchoCommand("doc", "javadoc"))


def test_nameless_command_is_rejected() -> None:
    with pytest.raises(CommandRegistrationError):
        Executor([Command()])


def test_slash_commands_in_registration_order() -> None:
    executor = Executor([_EchoCommand("b", "b"), _EchoCommand("a", "a")])
    assert [data.name for data in executor.slash_commands()] == ["b", "a"]


def test_match_builds_context_after_keyword() -> None:
    executor = Executor([_EchoCommand("doc", "doc")])
    matched = executor.match("doc  long String")
    assert matched is not None
    command, context = matched
    assert isinstance(context, CommandContext)
    assert context.match == "doc"
    assert context.remaining_text == "  long String"
