"""Shared error hierarchy.

Adapters and the command core raise subclasses of these so the dispatch
boundary can decide what to show the user and what to log.
"""

from __future__ import annotations

from typing import Optional


class DocbotError(Exception):
    """Base error for the bot."""

    recoverable: bool = True
    severity: str = "error"

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class TransientError(DocbotError):
    """Failure that may succeed when retried (network, rate limit)."""

    recoverable = True
    severity = "warning"


class PermanentError(DocbotError):
    """Failure that will not succeed on retry (validation, auth, config)."""

    recoverable = False
    severity = "error"
