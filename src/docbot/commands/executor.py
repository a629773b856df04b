from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.exceptions import DocbotError
from ..core.logging_utils import log_event
from ..parsers import ParseError, StringReader, word
from .base import Command, SlashCommandData
from .context import CommandContext
from .sources import (
    ButtonCommandSource,
    CommandSource,
    ComponentCommandSource,
    MessageCommandSource,
    MessageSender,
    OutgoingMessage,
    SlashCommandSource,
)

INVALID_ARGUMENTS_MESSAGE = "I could not understand that command: {reason}"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class CommandRegistrationError(DocbotError):
    """Raised when a command cannot be added to the executor."""


def _modality(source: CommandSource) -> str:
    if isinstance(source, MessageCommandSource):
        return "message"
    if isinstance(source, SlashCommandSource):
        return "slash"
    if isinstance(source, ButtonCommandSource):
        return "button"
    return "selection_menu"


class Executor:
    """Ordered command registry and router.

    Plain messages go to the first command whose keyword parser accepts the
    text. Structured events go to the command whose ``name`` they carry.
    Anything unmatched is ignored.
    """

    def __init__(
        self,
        commands: Iterable[Command] = (),
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._commands: list[Command] = []
        self._by_name: dict[str, Command] = {}
        for command in commands:
            self.register(command)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    def register(self, command: Command) -> None:
        name = (command.name or "").strip()
        if not name:
            raise CommandRegistrationError(
                f"{type(command).__name__} must define a non-empty name"
            )
        if name in self._by_name:
            raise CommandRegistrationError(f"Duplicate command name: {name}")
        self._commands.append(command)
        self._by_name[name] = command

    def find(self, name: Optional[str]) -> Optional[Command]:
        if not name:
            return None
        return self._by_name.get(name)

    def slash_commands(self) -> list[SlashCommandData]:
        data: list[SlashCommandData] = []
        for command in self._commands:
            slash = command.slash_data()
            if slash is not None:
                data.append(slash)
        return data

    def match(self, text: str) -> Optional[tuple[Command, CommandContext]]:
        reader = StringReader(text)
        for command in self._commands:
            keyword = command.keyword()
            if keyword is None:
                continue
            result = keyword.parse(reader)
            if result.ok:
                return command, CommandContext(result.reader, match=result.value)
        return None

    async def dispatch_message(
        self, source: MessageCommandSource, sender: MessageSender
    ) -> bool:
        matched = self.match(source.text)
        if matched is None:
            return False
        command, context = matched
        await self._run(command, context, source, sender)
        return True

    async def dispatch_slash(
        self, source: SlashCommandSource, sender: MessageSender
    ) -> bool:
        command = self.find(source.command_name)
        if command is None:
            self._logger.debug(
                "dispatch_slash: unknown command %r", source.command_name
            )
            return False
        context = CommandContext("", match=source.command_name)
        await self._run(command, context, source, sender)
        return True

    async def dispatch_component(
        self, source: ComponentCommandSource, sender: MessageSender
    ) -> bool:
        context = CommandContext(source.custom_id)
        name = context.try_shift(word())
        command = self.find(name)
        if command is None:
            self._logger.debug(
                "dispatch_component: unknown component %r", source.custom_id
            )
            return False
        context.match = name
        await self._run(command, context, source, sender)
        return True

    async def _run(
        self,
        command: Command,
        context: CommandContext,
        source: CommandSource,
        sender: MessageSender,
    ) -> None:
        log_event(
            self._logger,
            logging.INFO,
            "docbot.command.dispatched",
            command=command.name,
            modality=_modality(source),
            author_id=source.author_id,
        )
        try:
            await command.handle(context, source, sender)
        except ParseError as exc:
            log_event(
                self._logger,
                logging.INFO,
                "docbot.command.invalid_arguments",
                command=command.name,
                modality=_modality(source),
                reason=exc.reason,
                position=exc.position,
            )
            await sender.reply(
                OutgoingMessage(
                    content=INVALID_ARGUMENTS_MESSAGE.format(reason=exc.reason),
                    ephemeral=not isinstance(source, MessageCommandSource),
                )
            )
        except Exception as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "docbot.command.unhandled_error",
                command=command.name,
                modality=_modality(source),
                exc=exc,
            )
            await sender.reply(
                OutgoingMessage(
                    content=UNEXPECTED_ERROR_MESSAGE,
                    ephemeral=not isinstance(source, MessageCommandSource),
                )
            )
