from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, AsyncIterator, Optional

from ...commands.base import SlashCommandData
from ...commands.doc import DocCommand
from ...commands.executor import Executor
from ...commands.sources import (
    ButtonCommandSource,
    MessageCommandSource,
    SelectionMenuCommandSource,
    SlashCommandSource,
)
from ...core.config import BotConfig
from ...core.logging_utils import log_event, setup_rotating_logger
from ...doc.query import ElementLoader, FuzzyQueryResult, LoadResult, QueryApi
from ...doc.rendering import DocResultSender, TextDocResultSender
from ...doc.resolver import DisambiguationResolver
from ...state import InteractionStore
from .command_registry import sync_commands
from .components import COMPONENT_TYPE_BUTTON, COMPONENT_TYPE_STRING_SELECT
from .interactions import (
    extract_channel_id,
    extract_command_name_and_options,
    extract_component_custom_id,
    extract_component_type,
    extract_component_values,
    extract_guild_id,
    extract_interaction_id,
    extract_interaction_token,
    extract_message_fields,
    extract_message_id,
    extract_user_id,
    is_application_command,
    is_component_interaction,
)
from .rest import DiscordRestClient
from .sender import DiscordChannelSender, DiscordInteractionSender

GatewayEvent = tuple[str, dict[str, Any]]


class DiscordBotService:
    """Turns raw gateway dispatches into executor calls.

    The gateway connection itself is supplied by the caller as an async
    iterator of ``(event_type, payload)`` pairs.
    """

    def __init__(
        self,
        config: BotConfig,
        *,
        executor: Executor,
        store: InteractionStore,
        logger: logging.Logger,
        rest_client: Optional[DiscordRestClient] = None,
    ) -> None:
        self._config = config
        self._executor = executor
        self._store = store
        self._logger = logger
        self._rest = (
            rest_client
            if rest_client is not None
            else DiscordRestClient(bot_token=config.bot_token or "")
        )
        self._owns_rest = rest_client is None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def executor(self) -> Executor:
        return self._executor

    async def run(self, events: AsyncIterator[GatewayEvent]) -> None:
        await self.sync_application_commands()
        sweeper_task = asyncio.create_task(
            self._store.run_sweeper(self._config.sweep_interval_seconds)
        )
        log_event(
            self._logger,
            logging.INFO,
            "discord.bot.starting",
            command_count=len(self._executor.commands),
            interaction_ttl_seconds=self._config.interaction_ttl_seconds,
        )
        try:
            async for event_type, payload in events:
                task = asyncio.create_task(self.handle_dispatch(event_type, payload))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
        finally:
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            sweeper_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper_task
            await self.close()

    async def close(self) -> None:
        if self._owns_rest:
            with contextlib.suppress(Exception):
                await self._rest.close()

    async def sync_application_commands(self) -> None:
        registration = self._config.command_registration
        if not registration.enabled:
            log_event(self._logger, logging.INFO, "discord.commands.sync.disabled")
            return

        application_id = (self._config.application_id or "").strip()
        if not application_id:
            raise ValueError("missing Discord application id for command sync")

        slash_commands = self._executor.slash_commands()
        try:
            await sync_commands(
                self._rest,
                application_id=application_id,
                slash_commands=slash_commands,
                registration=registration,
                logger=self._logger,
            )
        except ValueError:
            raise
        except Exception as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.commands.sync.startup_failed",
                scope=registration.scope,
                command_count=len(slash_commands),
                exc=exc,
            )

    async def handle_dispatch(self, event_type: str, payload: dict[str, Any]) -> bool:
        """Route one gateway event; returns whether a command handled it."""
        try:
            if event_type == "MESSAGE_CREATE":
                return await self._handle_message(payload)
            if event_type == "INTERACTION_CREATE":
                return await self._handle_interaction(payload)
        except Exception as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "discord.dispatch.unhandled_error",
                event_type=event_type,
                exc=exc,
            )
        return False

    async def _handle_message(self, payload: dict[str, Any]) -> bool:
        fields = extract_message_fields(payload)
        if fields is None:
            return False
        author_id, channel_id, message_id, content = fields
        prefix = self._config.message_prefix
        if prefix:
            if not content.startswith(prefix):
                return False
            content = content[len(prefix) :]

        source = MessageCommandSource(
            author_id=author_id,
            channel_id=channel_id,
            message_id=message_id,
            text=content,
            guild_id=extract_guild_id(payload),
        )
        sender = DiscordChannelSender(
            self._rest,
            channel_id=channel_id,
            message_id=message_id,
            max_message_length=self._config.max_message_length,
            logger=self._logger,
        )
        return await self._executor.dispatch_message(source, sender)

    async def _handle_interaction(self, interaction_payload: dict[str, Any]) -> bool:
        interaction_id = extract_interaction_id(interaction_payload)
        interaction_token = extract_interaction_token(interaction_payload)
        channel_id = extract_channel_id(interaction_payload)
        user_id = extract_user_id(interaction_payload)

        if not interaction_id or not interaction_token or not channel_id or not user_id:
            self._logger.warning(
                "handle_interaction: missing required fields (interaction_id=%s, token=%s, channel=%s, user=%s)",
                bool(interaction_id),
                bool(interaction_token),
                bool(channel_id),
                bool(user_id),
            )
            return False

        guild_id = extract_guild_id(interaction_payload)
        is_component = is_component_interaction(interaction_payload)
        sender = DiscordInteractionSender(
            self._rest,
            interaction_id=interaction_id,
            interaction_token=interaction_token,
            application_id=self._config.application_id,
            is_component=is_component,
            max_message_length=self._config.max_message_length,
            logger=self._logger,
        )

        if is_application_command(interaction_payload):
            command_name, options = extract_command_name_and_options(
                interaction_payload
            )
            if command_name is None:
                return False
            slash = SlashCommandSource(
                author_id=user_id,
                channel_id=channel_id,
                interaction_id=interaction_id,
                interaction_token=interaction_token,
                command_name=command_name,
                options=options,
                guild_id=guild_id,
            )
            return await self._executor.dispatch_slash(slash, sender)

        if not is_component:
            return False

        custom_id = extract_component_custom_id(interaction_payload)
        if custom_id is None:
            return False
        component_type = extract_component_type(interaction_payload)
        message_id = extract_message_id(interaction_payload)
        if component_type == COMPONENT_TYPE_BUTTON:
            button = ButtonCommandSource(
                author_id=user_id,
                channel_id=channel_id,
                interaction_id=interaction_id,
                interaction_token=interaction_token,
                custom_id=custom_id,
                message_id=message_id,
                guild_id=guild_id,
            )
            return await self._executor.dispatch_component(button, sender)
        if component_type == COMPONENT_TYPE_STRING_SELECT:
            menu = SelectionMenuCommandSource(
                author_id=user_id,
                channel_id=channel_id,
                interaction_id=interaction_id,
                interaction_token=interaction_token,
                custom_id=custom_id,
                values=tuple(extract_component_values(interaction_payload)),
                message_id=message_id,
                guild_id=guild_id,
            )
            return await self._executor.dispatch_component(menu, sender)
        self._logger.debug(
            "handle_interaction: unsupported component type %r", component_type
        )
        return False


def build_executor(
    *,
    query_api: QueryApi,
    loader: ElementLoader,
    store: InteractionStore,
    result_sender: DocResultSender,
    logger: logging.Logger,
) -> Executor:
    """Every command the bot serves, in matching order."""
    resolver = DisambiguationResolver(
        query_api=query_api,
        loader=loader,
        result_sender=result_sender,
        store=store,
        command_name=DocCommand.name,
        logger=logger,
    )
    return Executor(
        [
            DocCommand(
                resolver=resolver,
                store=store,
                result_sender=result_sender,
                logger=logger,
            )
        ],
        logger=logger,
    )


class _MetadataOnlyBackend:
    """Query backend for executors that only publish slash metadata."""

    def query(self, loader: Any, text: str) -> list[FuzzyQueryResult]:
        raise RuntimeError("no query backend is configured")

    def find_by_qualified_name(self, name: str) -> list[LoadResult]:
        raise RuntimeError("no query backend is configured")


def registered_slash_commands() -> list[SlashCommandData]:
    """Slash metadata of the commands :func:`build_executor` registers."""
    backend = _MetadataOnlyBackend()
    executor = build_executor(
        query_api=backend,
        loader=backend,
        store=InteractionStore(),
        result_sender=TextDocResultSender(),
        logger=logging.getLogger(__name__),
    )
    return executor.slash_commands()


def create_bot_service(
    config: BotConfig,
    *,
    query_api: QueryApi,
    loader: ElementLoader,
    logger: Optional[logging.Logger] = None,
    result_sender: Optional[DocResultSender] = None,
    rest_client: Optional[DiscordRestClient] = None,
) -> DiscordBotService:
    """Wire the store, resolver and commands into a ready service.

    Without an explicit ``logger`` the bot logs to the rotating file named
    in ``config.log``.
    """
    if logger is None:
        logger = setup_rotating_logger("docbot-discord", config.log)
    store = InteractionStore(ttl_seconds=config.interaction_ttl_seconds, logger=logger)
    if result_sender is None:
        result_sender = TextDocResultSender(
            max_message_length=config.max_message_length
        )
    executor = build_executor(
        query_api=query_api,
        loader=loader,
        store=store,
        result_sender=result_sender,
        logger=logger,
    )
    return DiscordBotService(
        config,
        executor=executor,
        store=store,
        logger=logger,
        rest_client=rest_client,
    )
