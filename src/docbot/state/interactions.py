"""Short-lived, owner-scoped state for pending disambiguation prompts.

An :class:`ActiveInteraction` is created when a query has several plausible
answers and the user has to pick one. It can be consumed at most once, only
by its owner, and it disappears after a fixed age.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from ..core.logging_utils import log_event

DEFAULT_INTERACTION_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class ActiveInteraction:
    interaction_id: str
    owner_id: str
    created_at: float
    choices: tuple[Any, ...]
    short_description: bool
    omit_tags: bool

    def get_choice(self, choice_id: int) -> Optional[Any]:
        if 0 <= choice_id < len(self.choices):
            return self.choices[choice_id]
        return None


class ClaimStatus(enum.Enum):
    CLAIMED = "claimed"
    NOT_FOUND = "not_found"
    DENIED = "denied"


@dataclass(frozen=True)
class ClaimResult:
    status: ClaimStatus
    interaction: Optional[ActiveInteraction] = None


class InteractionStore:
    """Thread-safe map from interaction id to :class:`ActiveInteraction`.

    Every read and removal happens under one lock, and stale entries are
    dropped on read, so an expired entry is indistinguishable from one that
    never existed.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_INTERACTION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._entries: dict[str, ActiveInteraction] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for entry in self._entries.values() if not self._expired(entry))

    def __contains__(self, interaction_id: object) -> bool:
        if not isinstance(interaction_id, str):
            return False
        return self.get(interaction_id) is not None

    def create(
        self,
        *,
        owner_id: str,
        choices: Iterable[Any],
        short_description: bool,
        omit_tags: bool,
    ) -> ActiveInteraction:
        interaction = ActiveInteraction(
            interaction_id=uuid.uuid4().hex,
            owner_id=owner_id,
            created_at=self._clock(),
            choices=tuple(choices),
            short_description=short_description,
            omit_tags=omit_tags,
        )
        self.put(interaction)
        log_event(
            self._logger,
            logging.INFO,
            "docbot.interaction.created",
            interaction_id=interaction.interaction_id,
            owner_id=owner_id,
            choice_count=len(interaction.choices),
        )
        return interaction

    def put(self, interaction: ActiveInteraction) -> None:
        with self._lock:
            existing = self._entries.get(interaction.interaction_id)
            if existing is not None and not self._expired(existing):
                raise ValueError(
                    f"Interaction already stored: {interaction.interaction_id}"
                )
            self._entries[interaction.interaction_id] = interaction

    def get(self, interaction_id: str) -> Optional[ActiveInteraction]:
        with self._lock:
            return self._live_entry_locked(interaction_id)

    def remove(self, interaction_id: str) -> Optional[ActiveInteraction]:
        with self._lock:
            entry = self._live_entry_locked(interaction_id)
            if entry is not None:
                del self._entries[interaction_id]
            return entry

    def claim(self, interaction_id: str, user_id: Optional[str]) -> ClaimResult:
        """Look up, check ownership and consume in one atomic step.

        A non-owner gets ``DENIED`` and the entry stays. The owner gets
        ``CLAIMED`` and the entry is gone for every later caller.
        """
        with self._lock:
            entry = self._live_entry_locked(interaction_id)
            if entry is None:
                return ClaimResult(ClaimStatus.NOT_FOUND)
            if user_id is None or user_id != entry.owner_id:
                log_event(
                    self._logger,
                    logging.INFO,
                    "docbot.interaction.denied",
                    interaction_id=interaction_id,
                    owner_id=entry.owner_id,
                    user_id=user_id,
                )
                return ClaimResult(ClaimStatus.DENIED, entry)
            del self._entries[interaction_id]
        log_event(
            self._logger,
            logging.INFO,
            "docbot.interaction.claimed",
            interaction_id=interaction_id,
            owner_id=entry.owner_id,
        )
        return ClaimResult(ClaimStatus.CLAIMED, entry)

    def sweep_expired(self) -> int:
        with self._lock:
            stale = [
                key for key, entry in self._entries.items() if self._expired(entry)
            ]
            for key in stale:
                del self._entries[key]
        if stale:
            log_event(
                self._logger,
                logging.DEBUG,
                "docbot.interaction.expired",
                count=len(stale),
            )
        return len(stale)

    async def run_sweeper(self, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep_expired()

    def _expired(self, entry: ActiveInteraction) -> bool:
        return self._clock() - entry.created_at >= self._ttl_seconds

    def _live_entry_locked(self, interaction_id: str) -> Optional[ActiveInteraction]:
        entry = self._entries.get(interaction_id)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[interaction_id]
            return None
        return entry
