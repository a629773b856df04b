"""Decide between answering a query directly and asking the user to pick.

Tie-break tiers, first match wins:

1. a single candidate in total
2. a single ``exact`` candidate
3. a single ``case_sensitive_exact`` candidate

No candidates at all calls the caller's no-result fallback. Anything else
stores an :class:`~docbot.state.ActiveInteraction` with at most
:data:`~docbot.doc.rendering.MAX_PROMPT_CHOICES` choices and prompts.

The query engine and loader are blocking, so they run in a worker thread.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import Awaitable, Callable, Iterable, Optional

from ..commands.sources import CommandSource, MessageSender
from ..core.logging_utils import log_event
from ..state import InteractionStore
from .query import ElementLoader, FuzzyQueryResult, LoadResult, QueryApi
from .rendering import (
    AMBIGUOUS_LOAD_MESSAGE,
    MAX_PROMPT_CHOICES,
    DocResultSender,
    build_choice_prompt,
)

NoResultCallback = Callable[[], Awaitable[None]]


class Resolution(enum.Enum):
    ANSWERED = "answered"
    NO_RESULT = "no_result"
    PROMPTED = "prompted"


def dedupe_candidates(
    candidates: Iterable[FuzzyQueryResult],
) -> list[FuzzyQueryResult]:
    return list(dict.fromkeys(candidates))


def select_candidate(
    candidates: list[FuzzyQueryResult],
) -> Optional[FuzzyQueryResult]:
    if len(candidates) == 1:
        return candidates[0]
    exact = [candidate for candidate in candidates if candidate.exact]
    if len(exact) == 1:
        return exact[0]
    case_sensitive = [
        candidate for candidate in candidates if candidate.case_sensitive_exact
    ]
    if len(case_sensitive) == 1:
        return case_sensitive[0]
    return None


class DisambiguationResolver:
    def __init__(
        self,
        *,
        query_api: QueryApi,
        loader: ElementLoader,
        result_sender: DocResultSender,
        store: InteractionStore,
        command_name: str,
        logger: Optional[logging.Logger] = None,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._query_api = query_api
        self._loader = loader
        self._result_sender = result_sender
        self._store = store
        self._command_name = command_name
        self._logger = logger or logging.getLogger(__name__)
        self._timer = timer

    async def resolve(
        self,
        *,
        source: CommandSource,
        sender: MessageSender,
        query: str,
        short_description: bool,
        omit_tags: bool,
        on_no_result: NoResultCallback,
    ) -> Resolution:
        started = self._timer()
        candidates = await asyncio.to_thread(self._run_query, query.strip())
        elapsed = self._timer() - started

        chosen = select_candidate(candidates)
        if chosen is not None:
            await self.reply_for_result(
                source,
                sender,
                chosen,
                short_description=short_description,
                omit_tags=omit_tags,
                query_seconds=elapsed,
            )
            return Resolution.ANSWERED

        if not candidates:
            log_event(
                self._logger,
                logging.INFO,
                "docbot.query.no_result",
                query=query,
                author_id=source.author_id,
            )
            await on_no_result()
            return Resolution.NO_RESULT

        if len(candidates) > MAX_PROMPT_CHOICES:
            log_event(
                self._logger,
                logging.INFO,
                "docbot.query.choices_capped",
                query=query,
                candidate_count=len(candidates),
                kept=MAX_PROMPT_CHOICES,
            )
        interaction = self._store.create(
            owner_id=source.author_id,
            choices=candidates[:MAX_PROMPT_CHOICES],
            short_description=short_description,
            omit_tags=omit_tags,
        )
        await sender.reply(
            build_choice_prompt(
                self._command_name,
                interaction,
                query,
                total_results=len(candidates),
            )
        )
        return Resolution.PROMPTED

    async def reply_for_result(
        self,
        source: CommandSource,
        sender: MessageSender,
        result: FuzzyQueryResult,
        *,
        short_description: bool,
        omit_tags: bool,
        query_seconds: float,
    ) -> None:
        elements = await asyncio.to_thread(self._load_elements, result.qualified_name)
        if len(elements) == 1:
            await self._result_sender.reply_with_result(
                source,
                sender,
                elements[0],
                short_description=short_description,
                omit_tags=omit_tags,
                query_seconds=query_seconds,
            )
            return
        if not elements:
            await self._result_sender.reply_for_unresolved(
                sender, result.qualified_name
            )
            return
        log_event(
            self._logger,
            logging.WARNING,
            "docbot.query.ambiguous_load",
            qualified_name=result.qualified_name,
            element_count=len(elements),
        )
        await sender.reply(AMBIGUOUS_LOAD_MESSAGE)

    def _run_query(self, text: str) -> list[FuzzyQueryResult]:
        return dedupe_candidates(self._query_api.query(self._loader, text))

    def _load_elements(self, qualified_name: str) -> list[LoadResult]:
        return list(self._loader.find_by_qualified_name(qualified_name))
