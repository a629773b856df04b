"""In-memory interaction state."""

from .interactions import (
    DEFAULT_INTERACTION_TTL_SECONDS,
    ActiveInteraction,
    ClaimResult,
    ClaimStatus,
    InteractionStore,
)

__all__ = [
    "DEFAULT_INTERACTION_TTL_SECONDS",
    "ActiveInteraction",
    "ClaimResult",
    "ClaimStatus",
    "InteractionStore",
]
