from __future__ import annotations

import pytest

from docbot.commands import (
    ButtonCommandSource,
    MessageCommandSource,
    SelectionMenuCommandSource,
    SlashCommandSource,
)
from docbot.commands.doc import (
    BUTTON_DENIED_MESSAGE,
    INVALID_CHOICE_MESSAGE,
    MENU_DENIED_MESSAGE,
    NO_STORED_CHOICES_MESSAGE,
)
from docbot.commands.executor import INVALID_ARGUMENTS_MESSAGE
from docbot.doc.rendering import NO_RESULT_MESSAGE


def _message(text: str, author: str = "u1") -> MessageCommandSource:
    return MessageCommandSource(
        author_id=author, channel_id="c1", message_id="m1", text=text
    )


def _slash(author: str = "u1", **options) -> SlashCommandSource:
    return SlashCommandSource(
        author_id=author,
        channel_id="c1",
        interaction_id="i1",
        interaction_token="t1",
        command_name="doc",
        options=options,
    )


def _button(custom_id: str, author: str = "u1") -> ButtonCommandSource:
    return ButtonCommandSource(
        author_id=author,
        channel_id="c1",
        interaction_id="i2",
        interaction_token="t2",
        custom_id=custom_id,
        message_id="m2",
    )


def _menu(custom_id: str, value: str, author: str = "u1") -> SelectionMenuCommandSource:
    return SelectionMenuCommandSource(
        author_id=author,
        channel_id="c1",
        interaction_id="i3",
        interaction_token="t3",
        custom_id=custom_id,
        values=(value,),
        message_id="m2",
    )


@pytest.fixture()
def ambiguous(query_api, loader, make_candidate):
    query_api.results["get"] = [make_candidate("List#get"), make_candidate("Map#get")]
    for name in ("List#get", "Map#get"):
        query_api.results[name] = [make_candidate(name, exact=True)]
        loader.add(name)
    return query_api


async def _prompt(executor, sender, store, text: str = "doc get") -> str:
    await executor.dispatch_message(_message(text), sender)
    return sender.last.choices.choices[0].payload.split()[-1]


@pytest.mark.anyio
async def test_message_defaults_to_short_description(
    executor, query_api, loader, result_sender, sender, make_candidate
) -> None:
    query_api.results["String"] = [make_candidate("java.lang.String")]
    loader.add("java.lang.String")

    await executor.dispatch_message(_message("doc String"), sender)

    assert result_sender.results == [
        {"name": "java.lang.String", "short_description": True, "omit_tags": True}
    ]


@pytest.mark.anyio
async def test_long_flag_requests_full_description(
    executor, query_api, loader, result_sender, sender, make_candidate
) -> None:
    query_api.results["String"] = [make_candidate("java.lang.String")]
    loader.add("java.lang.String")

    await executor.dispatch_message(_message("javadoc long String"), sender)

    assert result_sender.results[0]["short_description"] is False
    assert query_api.queries == ["String"]


@pytest.mark.anyio
async def test_longer_word_is_not_the_long_flag(executor, query_api, sender) -> None:
    await executor.dispatch_message(_message("doc longValue"), sender)
    assert query_api.queries == ["longValue"]


@pytest.mark.anyio
async def test_too_short_query_is_rejected(executor, query_api, sender) -> None:
    await executor.dispatch_message(_message("doc x"), sender)

    assert query_api.queries == []
    assert sender.last.content == INVALID_ARGUMENTS_MESSAGE.format(
        reason="expected at least 2 characters"
    )


@pytest.mark.anyio
async def test_no_result_message_names_the_query(executor, sender) -> None:
    await executor.dispatch_message(_message("doc Nothing"), sender)
    assert [kind for kind, _message in sender.sent] == ["edit_or_reply"]
    assert sender.last.content == NO_RESULT_MESSAGE.format(query="Nothing")


@pytest.mark.anyio
async def test_slash_options_map_to_flags(
    executor, query_api, loader, result_sender, sender, make_candidate
) -> None:
    query_api.results["String"] = [make_candidate("java.lang.String")]
    loader.add("java.lang.String")

    await executor.dispatch_slash(_slash(query="String", long=True), sender)
    await executor.dispatch_slash(
        _slash(query="String", **{"omit-tags": False}), sender
    )

    assert result_sender.results == [
        {"name": "java.lang.String", "short_description": False, "omit_tags": True},
        {"name": "java.lang.String", "short_description": True, "omit_tags": False},
    ]


@pytest.mark.anyio
async def test_slash_without_query_is_an_argument_error(executor, sender) -> None:
    await executor.dispatch_slash(_slash(), sender)
    assert sender.last.ephemeral
    assert "missing required option 'query'" in sender.last.content


@pytest.mark.anyio
async def test_button_choice_answers_with_stored_flags(
    executor, ambiguous, result_sender, store, sender
) -> None:
    interaction_id = await _prompt(executor, sender, store, "doc long get")

    await executor.dispatch_component(_button(f"doc 1 {interaction_id}"), sender)

    assert result_sender.results == [
        {"name": "Map#get", "short_description": False, "omit_tags": True}
    ]
    assert interaction_id not in store


@pytest.mark.anyio
async def test_menu_choice_answers(
    executor, ambiguous, result_sender, store, sender
) -> None:
    interaction_id = await _prompt(executor, sender, store)

    await executor.dispatch_component(_menu(f"doc {interaction_id}", "0"), sender)

    assert [r["name"] for r in result_sender.results] == ["List#get"]


@pytest.mark.anyio
async def test_menu_denied_for_other_user(executor, ambiguous, store, sender) -> None:
    interaction_id = await _prompt(executor, sender, store)

    await executor.dispatch_component(
        _menu(f"doc {interaction_id}", "0", author="u2"), sender
    )

    assert sender.last.content == MENU_DENIED_MESSAGE
    assert sender.last.ephemeral
    assert interaction_id in store


@pytest.mark.anyio
async def test_out_of_range_choice_consumes_interaction(
    executor, ambiguous, result_sender, store, sender
) -> None:
    interaction_id = await _prompt(executor, sender, store)

    await executor.dispatch_component(_button(f"doc 9 {interaction_id}"), sender)
    assert sender.last.content == INVALID_CHOICE_MESSAGE
    assert interaction_id not in store

    await executor.dispatch_component(_button(f"doc 0 {interaction_id}"), sender)
    assert sender.last.content == NO_STORED_CHOICES_MESSAGE
    assert result_sender.results == []


@pytest.mark.anyio
async def test_malformed_button_payload_is_an_argument_error(
    executor, store, sender
) -> None:
    await executor.dispatch_component(_button("doc"), sender)
    assert sender.last.content.startswith("I could not understand that command")
    assert sender.last.ephemeral


@pytest.mark.anyio
async def test_chosen_name_without_element_is_unresolved(
    executor, query_api, result_sender, store, sender, make_candidate
) -> None:
    query_api.results["get"] = [make_candidate("A#get"), make_candidate("B#get")]
    interaction_id = await _prompt(executor, sender, store)

    await executor.dispatch_component(_button(f"doc 0 {interaction_id}"), sender)

    assert result_sender.unresolved == ["A#get"]


def test_button_denied_message_is_distinct_from_not_found() -> None:
    assert BUTTON_DENIED_MESSAGE != NO_STORED_CHOICES_MESSAGE
