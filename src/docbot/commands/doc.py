from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.logging_utils import log_event
from ..doc.query import FuzzyQueryResult
from ..doc.rendering import NO_RESULT_MESSAGE, DocResultSender
from ..doc.resolver import DisambiguationResolver
from ..parsers import Parser, StringReader, integer, remaining, token, word
from ..state import ClaimStatus, InteractionStore
from .base import Command, SlashCommandData, SlashOption
from .context import CommandContext, CommandParseError
from .sources import (
    ButtonCommandSource,
    CommandSource,
    ComponentCommandSource,
    MessageCommandSource,
    MessageSender,
    OutgoingMessage,
    SelectionMenuCommandSource,
    SlashCommandSource,
)

DOC_COMMAND_NAME = "doc"
QUERY_MIN_LENGTH = 2

NO_STORED_CHOICES_MESSAGE = "I couldn't find any stored choices for that message."
INVALID_CHOICE_MESSAGE = "That choice is not one of the offered results."
BUTTON_DENIED_MESSAGE = "Only the person who asked can use these buttons."
MENU_DENIED_MESSAGE = "Only the person who asked can use this menu."

DOC_SLASH_COMMAND = SlashCommandData(
    name=DOC_COMMAND_NAME,
    description="Fetches Javadoc for methods, classes and fields.",
    options=(
        SlashOption(
            "string",
            "query",
            "The query. Example: 'String#contains('",
            required=True,
        ),
        SlashOption("boolean", "long", "Display the full Javadoc text"),
        SlashOption("boolean", "omit-tags", "Leave out the Javadoc tags"),
    ),
)


class DocCommand(Command):
    """Javadoc lookup: ``doc [long] <query>`` plus its follow-up components."""

    name = DOC_COMMAND_NAME

    def __init__(
        self,
        *,
        resolver: DisambiguationResolver,
        store: InteractionStore,
        result_sender: DocResultSender,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._result_sender = result_sender
        self._logger = logger or logging.getLogger(__name__)

    def keyword(self) -> Parser[Any]:
        return token("doc").or_(token("javadoc"))

    def slash_data(self) -> SlashCommandData:
        return DOC_SLASH_COMMAND

    async def handle_message(
        self,
        context: CommandContext,
        source: MessageCommandSource,
        sender: MessageSender,
    ) -> None:
        is_long = context.try_shift(token("long"))
        query = context.shift(remaining(QUERY_MIN_LENGTH))
        await self._handle_query(
            source,
            sender,
            query,
            short_description=is_long is None,
            omit_tags=True,
        )

    async def handle_slash(
        self,
        context: CommandContext,
        source: SlashCommandSource,
        sender: MessageSender,
    ) -> None:
        raw_query = source.option("query")
        if not isinstance(raw_query, str):
            raise CommandParseError("missing required option 'query'", position=0)
        query = remaining(QUERY_MIN_LENGTH).parse(StringReader(raw_query)).get_or_raise()
        await self._handle_query(
            source,
            sender,
            query,
            short_description=not source.option_bool("long", default=False),
            omit_tags=source.option_bool("omit-tags", default=True),
        )

    async def handle_button(
        self,
        context: CommandContext,
        source: ButtonCommandSource,
        sender: MessageSender,
    ) -> None:
        choice_id = context.shift(integer())
        interaction_id = context.shift(word())
        await self._handle_stored_interaction(
            source,
            sender,
            choice_id=choice_id,
            interaction_id=interaction_id,
            denied_message=BUTTON_DENIED_MESSAGE,
        )

    async def handle_selection_menu(
        self,
        context: CommandContext,
        source: SelectionMenuCommandSource,
        sender: MessageSender,
    ) -> None:
        interaction_id = context.shift(word())
        choice_id = integer().parse(StringReader(source.option or "")).get_or_raise()
        await self._handle_stored_interaction(
            source,
            sender,
            choice_id=choice_id,
            interaction_id=interaction_id,
            denied_message=MENU_DENIED_MESSAGE,
        )

    async def _handle_stored_interaction(
        self,
        source: ComponentCommandSource,
        sender: MessageSender,
        *,
        choice_id: int,
        interaction_id: str,
        denied_message: str,
    ) -> None:
        claim = self._store.claim(interaction_id, source.author_id)
        if claim.status is ClaimStatus.NOT_FOUND:
            await sender.edit_or_reply(NO_STORED_CHOICES_MESSAGE)
            return
        if claim.status is ClaimStatus.DENIED:
            await sender.reply(OutgoingMessage(content=denied_message, ephemeral=True))
            return

        interaction = claim.interaction
        assert interaction is not None
        choice = interaction.get_choice(choice_id)
        if not isinstance(choice, FuzzyQueryResult):
            log_event(
                self._logger,
                logging.INFO,
                "docbot.interaction.invalid_choice",
                interaction_id=interaction_id,
                choice_id=choice_id,
                choice_count=len(interaction.choices),
            )
            await sender.edit_or_reply(INVALID_CHOICE_MESSAGE)
            return

        async def _unresolved() -> None:
            await self._result_sender.reply_for_unresolved(
                sender, choice.qualified_name
            )

        await self._resolver.resolve(
            source=source,
            sender=sender,
            query=choice.qualified_name,
            short_description=interaction.short_description,
            omit_tags=interaction.omit_tags,
            on_no_result=_unresolved,
        )

    async def _handle_query(
        self,
        source: CommandSource,
        sender: MessageSender,
        query: str,
        *,
        short_description: bool,
        omit_tags: bool,
    ) -> None:
        async def _no_result() -> None:
            await sender.edit_or_reply(NO_RESULT_MESSAGE.format(query=query.strip()))

        await self._resolver.resolve(
            source=source,
            sender=sender,
            query=query,
            short_description=short_description,
            omit_tags=omit_tags,
            on_no_result=_no_result,
        )
