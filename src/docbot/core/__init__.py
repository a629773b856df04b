"""Core runtime primitives."""

from .exceptions import DocbotError, PermanentError, TransientError
from .logging_utils import log_event

__all__ = ["DocbotError", "PermanentError", "TransientError", "log_event"]
