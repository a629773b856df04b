from __future__ import annotations

import logging
from typing import Iterable, Optional

from ...commands.base import SlashCommandData
from ...core.config import CommandRegistration
from ...core.logging_utils import log_event
from .commands import build_application_commands
from .rest import DiscordRestClient


def sync_targets(registration: CommandRegistration) -> list[Optional[str]]:
    """Guild ids whose commands get overwritten; ``None`` is the global scope."""
    scope = registration.scope.strip().lower()
    if scope == "global":
        return [None]
    if scope != "guild":
        raise ValueError("scope must be 'global' or 'guild'")
    guild_ids = sorted(
        {guild_id.strip() for guild_id in registration.guild_ids if guild_id.strip()}
    )
    if not guild_ids:
        raise ValueError("guild scope requires at least one guild_id")
    return list(guild_ids)


async def sync_commands(
    rest: DiscordRestClient,
    *,
    application_id: str,
    slash_commands: Iterable[SlashCommandData],
    registration: CommandRegistration,
    logger: logging.Logger,
) -> int:
    """Publish ``slash_commands`` to every target scope; returns the scope count."""
    targets = sync_targets(registration)
    payload = build_application_commands(slash_commands)
    for guild_id in targets:
        updated = await rest.bulk_overwrite_application_commands(
            application_id=application_id,
            commands=payload,
            guild_id=guild_id,
        )
        log_event(
            logger,
            logging.INFO,
            "discord.commands.sync.overwrite",
            scope="global" if guild_id is None else "guild",
            guild_id=guild_id,
            application_id=application_id,
            commands=[command["name"] for command in payload],
            updated_count=len(updated),
        )
    return len(targets)
