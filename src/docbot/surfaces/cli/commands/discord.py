from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer

from ....core.config import BotConfig, ConfigError, load_bot_config
from ....core.logging_utils import setup_rotating_logger
from ....integrations.discord.command_registry import sync_commands
from ....integrations.discord.commands import build_application_commands
from ....integrations.discord.rest import DiscordRestClient
from ....integrations.discord.service import registered_slash_commands


async def _sync_discord_application_commands(
    config: BotConfig,
    *,
    logger: logging.Logger,
    rest_client_factory: Callable[..., Any] = DiscordRestClient,
    sync_func: Callable[..., Awaitable[int]] = sync_commands,
) -> int:
    if not config.bot_token:
        raise ConfigError(f"missing bot token env '{config.bot_token_env}'")
    if not config.application_id:
        raise ConfigError(f"missing application id env '{config.app_id_env}'")

    async with rest_client_factory(bot_token=config.bot_token) as rest:
        return await sync_func(
            rest,
            application_id=config.application_id,
            slash_commands=registered_slash_commands(),
            registration=config.command_registration,
            logger=logger,
        )


def register_discord_commands(
    app: typer.Typer,
    *,
    raise_exit: Callable,
    rest_client_factory: Callable[..., Any] = DiscordRestClient,
) -> None:
    @app.command("commands")
    def discord_commands(
        path: Optional[Path] = typer.Option(
            None, "--path", help="Directory containing docbot.yml"
        ),
    ) -> None:
        """Print the slash command payload that register-commands sends."""
        try:
            load_bot_config(path or Path.cwd())
        except ConfigError as exc:
            raise_exit(str(exc), cause=exc)
        payload = build_application_commands(registered_slash_commands())
        typer.echo(json.dumps(payload, indent=2))

    @app.command("register-commands")
    def discord_register_commands(
        path: Optional[Path] = typer.Option(
            None, "--path", help="Directory containing docbot.yml"
        ),
    ) -> None:
        """Overwrite the bot's slash commands on Discord."""
        try:
            config = load_bot_config(path or Path.cwd())
        except ConfigError as exc:
            raise_exit(str(exc), cause=exc)

        if not config.enabled:
            raise_exit("docbot is disabled; set enabled: true in docbot.yml")
        logger = setup_rotating_logger("docbot-discord", config.log)
        try:
            scope_count = asyncio.run(
                _sync_discord_application_commands(
                    config,
                    logger=logger,
                    rest_client_factory=rest_client_factory,
                )
            )
        except (ConfigError, ValueError) as exc:
            raise_exit(str(exc), cause=exc)

        typer.echo(
            f"Discord application commands synchronized ({scope_count} scope(s))."
        )
