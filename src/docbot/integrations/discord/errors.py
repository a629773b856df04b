from __future__ import annotations

from typing import Optional

from ...core.exceptions import DocbotError, PermanentError, TransientError


class DiscordError(DocbotError):
    """Base Discord integration error."""


class DiscordAPIError(DiscordError):
    """Discord API request error."""

    def __init__(
        self,
        message: str,
        *,
        retry_after: Optional[float] = None,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.retry_after = retry_after
        self.status_code = status_code


class DiscordTransientError(DiscordAPIError, TransientError):
    """Retryable Discord API error (rate limits, server errors, network)."""


class DiscordPermanentError(DiscordAPIError, PermanentError):
    """Non-retryable Discord API error (auth failures, invalid requests)."""

    recoverable = PermanentError.recoverable
    severity = PermanentError.severity
