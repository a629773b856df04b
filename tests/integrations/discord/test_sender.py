from __future__ import annotations

from typing import Any

import pytest

from docbot.commands import Choice, ChoicePrompt, OutgoingMessage
from docbot.integrations.discord.errors import DiscordPermanentError
from docbot.integrations.discord.sender import (
    DiscordChannelSender,
    DiscordInteractionSender,
    build_message_payload,
)


class _FakeRest:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.channel_messages: list[dict[str, Any]] = []
        self.interaction_responses: list[dict[str, Any]] = []
        self.followups: list[dict[str, Any]] = []

    async def create_channel_message(
        self, *, channel_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        if self.fail:
            raise DiscordPermanentError("nope", status_code=403)
        self.channel_messages.append({"channel_id": channel_id, "payload": payload})
        return {"id": "sent"}

    async def create_interaction_response(
        self, *, interaction_id: str, interaction_token: str, payload: dict[str, Any]
    ) -> None:
        if self.fail:
            raise DiscordPermanentError("nope", status_code=400)
        self.interaction_responses.append(
            {
                "interaction_id": interaction_id,
                "interaction_token": interaction_token,
                "payload": payload,
            }
        )

    async def create_followup_message(
        self, *, application_id: str, interaction_token: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        self.followups.append({"application_id": application_id, "payload": payload})
        return {}


def test_payload_truncates_and_disables_mentions() -> None:
    payload = build_message_payload(
        OutgoingMessage(content="x" * 3000, ephemeral=True), max_len=100
    )
    assert len(payload["content"]) <= 100
    assert payload["allowed_mentions"] == {"parse": []}
    assert payload["flags"] == 64
    assert "components" not in payload


def test_payload_renders_choice_prompt_as_buttons() -> None:
    prompt = ChoicePrompt(
        choices=(Choice(choice_id=0, label="List#get", payload="doc 0 abc"),),
        menu_payload="doc abc",
    )

    payload = build_message_payload(OutgoingMessage(content="pick", choices=prompt))

    (row,) = payload["components"]
    (button,) = row["components"]
    assert button["custom_id"] == "doc 0 abc"
    assert button["label"] == "List#get"


@pytest.mark.anyio
async def test_channel_sender_references_source_message() -> None:
    rest = _FakeRest()
    sender = DiscordChannelSender(rest, channel_id="c-1", message_id="m-1")

    await sender.reply(OutgoingMessage(content="hi", ephemeral=True))
    await sender.edit_or_reply("again")

    first, second = rest.channel_messages
    assert first["payload"]["message_reference"]["message_id"] == "m-1"
    assert "flags" not in first["payload"]
    assert second["payload"]["content"] == "again"


@pytest.mark.anyio
async def test_channel_sender_swallows_api_errors(caplog) -> None:
    sender = DiscordChannelSender(_FakeRest(fail=True), channel_id="c-1")

    await sender.reply("hi")

    assert any("discord.send.channel_failed" in r.message for r in caplog.records)


@pytest.mark.anyio
async def test_slash_reply_uses_message_callback() -> None:
    rest = _FakeRest()
    sender = DiscordInteractionSender(
        rest, interaction_id="i-1", interaction_token="t-1"
    )

    await sender.edit_or_reply(OutgoingMessage(content="answer", ephemeral=True))

    (response,) = rest.interaction_responses
    assert response["payload"]["type"] == 4
    assert response["payload"]["data"]["flags"] == 64
    assert sender.responded


@pytest.mark.anyio
async def test_component_edit_updates_message_and_clears_components() -> None:
    rest = _FakeRest()
    sender = DiscordInteractionSender(
        rest, interaction_id="i-1", interaction_token="t-1", is_component=True
    )

    await sender.edit_or_reply("picked")

    (response,) = rest.interaction_responses
    assert response["payload"]["type"] == 7
    assert response["payload"]["data"]["components"] == []


@pytest.mark.anyio
async def test_component_ephemeral_reply_does_not_touch_prompt() -> None:
    rest = _FakeRest()
    sender = DiscordInteractionSender(
        rest, interaction_id="i-1", interaction_token="t-1", is_component=True
    )

    await sender.reply(OutgoingMessage(content="not yours", ephemeral=True))

    (response,) = rest.interaction_responses
    assert response["payload"]["type"] == 4


@pytest.mark.anyio
async def test_second_answer_becomes_followup() -> None:
    rest = _FakeRest()
    sender = DiscordInteractionSender(
        rest, interaction_id="i-1", interaction_token="t-1", application_id="app-1"
    )

    await sender.reply("first")
    await sender.reply("second")

    assert len(rest.interaction_responses) == 1
    assert rest.followups == [
        {
            "application_id": "app-1",
            "payload": {"content": "second", "allowed_mentions": {"parse": []}},
        }
    ]


@pytest.mark.anyio
async def test_interaction_sender_swallows_api_errors() -> None:
    sender = DiscordInteractionSender(
        _FakeRest(fail=True), interaction_id="i-1", interaction_token="t-1"
    )

    await sender.reply("hi")

    assert not sender.responded
