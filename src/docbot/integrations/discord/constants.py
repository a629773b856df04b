from __future__ import annotations

DISCORD_API_BASE_URL = "https://discord.com/api/v10"

# Interaction types (https://discord.com/developers/docs/interactions/receiving-and-responding).
INTERACTION_TYPE_PING = 1
INTERACTION_TYPE_APPLICATION_COMMAND = 2
INTERACTION_TYPE_MESSAGE_COMPONENT = 3

# Interaction callback types.
CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE = 4
CALLBACK_UPDATE_MESSAGE = 7

# Message flag that hides a reply from everyone but the invoker.
MESSAGE_FLAG_EPHEMERAL = 1 << 6
