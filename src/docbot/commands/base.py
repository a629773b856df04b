from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

from ..parsers import Parser
from .context import CommandContext
from .sources import (
    ButtonCommandSource,
    CommandSource,
    MessageCommandSource,
    MessageSender,
    SelectionMenuCommandSource,
    SlashCommandSource,
)

OptionType = Literal["string", "integer", "boolean"]


@dataclass(frozen=True)
class SlashOption:
    type: OptionType
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class SlashCommandData:
    """Upfront schema for platforms that register structured commands."""

    name: str
    description: str
    options: tuple[SlashOption, ...] = ()


class Command:
    """A unit of bot behavior reachable from any interaction modality.

    ``name`` routes structured events (slash commands, button and menu
    payloads); ``keyword()`` matches plain messages. Subclasses override the
    ``handle_*`` variants they support; the rest do nothing.
    """

    name: str = ""

    def keyword(self) -> Optional[Parser[Any]]:
        return None

    def slash_data(self) -> Optional[SlashCommandData]:
        return None

    async def handle(
        self,
        context: CommandContext,
        source: CommandSource,
        sender: MessageSender,
    ) -> None:
        if isinstance(source, MessageCommandSource):
            await self.handle_message(context, source, sender)
        elif isinstance(source, SlashCommandSource):
            await self.handle_slash(context, source, sender)
        elif isinstance(source, ButtonCommandSource):
            await self.handle_button(context, source, sender)
        elif isinstance(source, SelectionMenuCommandSource):
            await self.handle_selection_menu(context, source, sender)
        else:
            raise TypeError(f"Unsupported command source: {type(source).__name__}")

    async def handle_message(
        self,
        context: CommandContext,
        source: MessageCommandSource,
        sender: MessageSender,
    ) -> None:
        return None

    async def handle_slash(
        self,
        context: CommandContext,
        source: SlashCommandSource,
        sender: MessageSender,
    ) -> None:
        return None

    async def handle_button(
        self,
        context: CommandContext,
        source: ButtonCommandSource,
        sender: MessageSender,
    ) -> None:
        return None

    async def handle_selection_menu(
        self,
        context: CommandContext,
        source: SelectionMenuCommandSource,
        sender: MessageSender,
    ) -> None:
        return None
