"""Reply targets backed by the Discord REST API.

Delivery failures are logged and dropped here; command code never sees a
Discord error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...commands.sources import MessageContent, OutgoingMessage, as_outgoing
from ...core.logging_utils import log_event
from .components import build_prompt_components
from .constants import (
    CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE,
    CALLBACK_UPDATE_MESSAGE,
    MESSAGE_FLAG_EPHEMERAL,
)
from .errors import DiscordAPIError
from .rendering import DISCORD_MAX_MESSAGE_LENGTH, truncate_for_discord
from .rest import DiscordRestClient


def build_message_payload(
    message: OutgoingMessage,
    *,
    max_len: int = DISCORD_MAX_MESSAGE_LENGTH,
    allow_ephemeral: bool = True,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "content": truncate_for_discord(message.content, max_len=max_len),
        "allowed_mentions": {"parse": []},
    }
    if message.choices is not None:
        payload["components"] = build_prompt_components(message.choices)
    if allow_ephemeral and message.ephemeral:
        payload["flags"] = MESSAGE_FLAG_EPHEMERAL
    return payload


class DiscordChannelSender:
    """Answers a plain channel message with a new message referencing it.

    Bot users cannot edit other users' messages, so ``edit_or_reply`` always
    posts a new message.
    """

    def __init__(
        self,
        rest: DiscordRestClient,
        *,
        channel_id: str,
        message_id: Optional[str] = None,
        max_message_length: int = DISCORD_MAX_MESSAGE_LENGTH,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._rest = rest
        self._channel_id = channel_id
        self._message_id = message_id
        self._max_message_length = max_message_length
        self._logger = logger or logging.getLogger(__name__)

    async def reply(self, message: MessageContent) -> None:
        payload = build_message_payload(
            as_outgoing(message),
            max_len=self._max_message_length,
            allow_ephemeral=False,
        )
        if self._message_id:
            payload["message_reference"] = {
                "message_id": self._message_id,
                "fail_if_not_exists": False,
            }
        try:
            await self._rest.create_channel_message(
                channel_id=self._channel_id, payload=payload
            )
        except DiscordAPIError as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.send.channel_failed",
                channel_id=self._channel_id,
                exc=exc,
            )

    async def edit_or_reply(self, message: MessageContent) -> None:
        await self.reply(message)


class DiscordInteractionSender:
    """Answers a slash command or component interaction.

    The first answer uses the interaction callback. For component
    interactions ``edit_or_reply`` replaces the message carrying the
    components. Later answers become follow-up messages when an application
    id is known.
    """

    def __init__(
        self,
        rest: DiscordRestClient,
        *,
        interaction_id: str,
        interaction_token: str,
        application_id: Optional[str] = None,
        is_component: bool = False,
        max_message_length: int = DISCORD_MAX_MESSAGE_LENGTH,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._rest = rest
        self._interaction_id = interaction_id
        self._interaction_token = interaction_token
        self._application_id = application_id
        self._is_component = is_component
        self._max_message_length = max_message_length
        self._logger = logger or logging.getLogger(__name__)
        self._responded = False

    @property
    def responded(self) -> bool:
        return self._responded

    async def reply(self, message: MessageContent) -> None:
        await self._send(as_outgoing(message), CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE)

    async def edit_or_reply(self, message: MessageContent) -> None:
        outgoing = as_outgoing(message)
        if self._is_component and not outgoing.ephemeral:
            payload = build_message_payload(outgoing, max_len=self._max_message_length)
            # An update without components leaves the answered prompt inert.
            payload.setdefault("components", [])
            await self._callback_or_followup(CALLBACK_UPDATE_MESSAGE, payload)
            return
        await self._send(outgoing, CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE)

    async def _send(self, message: OutgoingMessage, callback_type: int) -> None:
        payload = build_message_payload(message, max_len=self._max_message_length)
        await self._callback_or_followup(callback_type, payload)

    async def _callback_or_followup(
        self, callback_type: int, payload: dict[str, Any]
    ) -> None:
        try:
            if not self._responded:
                await self._rest.create_interaction_response(
                    interaction_id=self._interaction_id,
                    interaction_token=self._interaction_token,
                    payload={"type": callback_type, "data": payload},
                )
                self._responded = True
                return
            if not self._application_id:
                log_event(
                    self._logger,
                    logging.WARNING,
                    "discord.send.followup_unavailable",
                    interaction_id=self._interaction_id,
                )
                return
            await self._rest.create_followup_message(
                application_id=self._application_id,
                interaction_token=self._interaction_token,
                payload=payload,
            )
        except DiscordAPIError as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.send.interaction_failed",
                interaction_id=self._interaction_id,
                callback_type=callback_type,
                exc=exc,
            )
