"""Where a command invocation came from and how to answer it.

Four modalities share one small capability set: who asked (``author_id``)
and a :class:`MessageSender` to reply through. Each source additionally
carries the data only that modality has.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Union


@dataclass(frozen=True)
class Choice:
    """One selectable answer; ``payload`` comes back when it is picked."""

    choice_id: int
    label: str
    payload: str


@dataclass(frozen=True)
class ChoicePrompt:
    """Answers offered for picking.

    Shown as one button per choice, or as a single menu whose payload is
    ``menu_payload`` and whose option values are the choice ids.
    """

    choices: tuple[Choice, ...]
    menu_payload: str
    as_menu: bool = False


@dataclass(frozen=True)
class OutgoingMessage:
    """Platform-neutral reply: text plus an optional choice prompt."""

    content: str
    choices: Optional[ChoicePrompt] = None
    ephemeral: bool = False


MessageContent = Union[str, OutgoingMessage]


def as_outgoing(message: MessageContent) -> OutgoingMessage:
    if isinstance(message, OutgoingMessage):
        return message
    return OutgoingMessage(content=str(message))


class MessageSender(Protocol):
    """Reply target for one dispatch.

    Delivery is best effort: implementations log and swallow platform
    errors, callers never inspect the outcome.
    """

    async def reply(self, message: MessageContent) -> None: ...

    async def edit_or_reply(self, message: MessageContent) -> None: ...


@dataclass(frozen=True)
class MessageCommandSource:
    """A plain chat message; arguments come from ``text``."""

    author_id: str
    channel_id: str
    message_id: str
    text: str
    guild_id: Optional[str] = None


@dataclass(frozen=True)
class SlashCommandSource:
    """A slash command with named, typed options."""

    author_id: str
    channel_id: str
    interaction_id: str
    interaction_token: str
    command_name: str
    options: Mapping[str, Any] = field(default_factory=dict)
    guild_id: Optional[str] = None

    def option(self, name: str) -> Any:
        return self.options.get(name)

    def option_bool(self, name: str, *, default: bool) -> bool:
        value = self.options.get(name)
        if isinstance(value, bool):
            return value
        return default


@dataclass(frozen=True)
class ButtonCommandSource:
    """A button click; ``custom_id`` is the encoded payload of the button."""

    author_id: str
    channel_id: str
    interaction_id: str
    interaction_token: str
    custom_id: str
    message_id: Optional[str] = None
    guild_id: Optional[str] = None


@dataclass(frozen=True)
class SelectionMenuCommandSource:
    """A selection-menu choice; ``values`` are the selected option values."""

    author_id: str
    channel_id: str
    interaction_id: str
    interaction_token: str
    custom_id: str
    values: tuple[str, ...] = ()
    message_id: Optional[str] = None
    guild_id: Optional[str] = None

    @property
    def option(self) -> Optional[str]:
        return self.values[0] if self.values else None


CommandSource = Union[
    MessageCommandSource,
    SlashCommandSource,
    ButtonCommandSource,
    SelectionMenuCommandSource,
]
ComponentCommandSource = Union[ButtonCommandSource, SelectionMenuCommandSource]
