from __future__ import annotations

from typing import Final

from ...doc.markdown import truncate_text

DISCORD_MAX_MESSAGE_LENGTH: Final[int] = 2000
DISCORD_MIN_TRUNCATION_LENGTH: Final[int] = 32


def truncate_for_discord(text: str, max_len: int = DISCORD_MAX_MESSAGE_LENGTH) -> str:
    """Fit ``text`` into one Discord message of at most ``max_len`` chars."""
    limit = min(
        max(max_len, DISCORD_MIN_TRUNCATION_LENGTH), DISCORD_MAX_MESSAGE_LENGTH
    )
    return truncate_text(text, limit)
