"""Shared fakes for the command core.

The query engine, element loader and reply targets are collaborators the
bot only consumes, so tests drive it with small in-memory stand-ins.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import pytest

from docbot.commands import Executor, MessageContent, OutgoingMessage
from docbot.commands.doc import DocCommand
from docbot.commands.sources import as_outgoing
from docbot.doc import (
    DisambiguationResolver,
    DocElement,
    FuzzyQueryResult,
    LoadResult,
    TextDocResultSender,
)
from docbot.state import InteractionStore


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSender:
    """Collects everything a command tried to send, in order."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, OutgoingMessage]] = []

    async def reply(self, message: MessageContent) -> None:
        self.sent.append(("reply", as_outgoing(message)))

    async def edit_or_reply(self, message: MessageContent) -> None:
        self.sent.append(("edit_or_reply", as_outgoing(message)))

    @property
    def contents(self) -> list[str]:
        return [message.content for _kind, message in self.sent]

    @property
    def last(self) -> OutgoingMessage:
        assert self.sent, "nothing was sent"
        return self.sent[-1][1]


class FakeQueryApi:
    def __init__(self) -> None:
        self.results: dict[str, list[FuzzyQueryResult]] = {}
        self.queries: list[str] = []

    def query(self, loader: Any, text: str) -> Iterable[FuzzyQueryResult]:
        self.queries.append(text)
        return list(self.results.get(text, []))


class FakeLoader:
    def __init__(self) -> None:
        self.elements: dict[str, list[LoadResult]] = {}

    def add(self, qualified_name: str, **fields: Any) -> DocElement:
        element = DocElement(qualified_name=qualified_name, **fields)
        self.elements.setdefault(qualified_name, []).append(
            LoadResult(element=element, loader=self)
        )
        return element

    def find_by_qualified_name(self, name: str) -> list[LoadResult]:
        return list(self.elements.get(name, []))


class RecordingResultSender:
    def __init__(self) -> None:
        self.results: list[dict[str, Any]] = []
        self.unresolved: list[str] = []

    async def reply_with_result(
        self,
        source: Any,
        sender: Any,
        load_result: LoadResult,
        *,
        short_description: bool,
        omit_tags: bool,
        query_seconds: float,
    ) -> None:
        self.results.append(
            {
                "name": load_result.element.qualified_name,
                "short_description": short_description,
                "omit_tags": omit_tags,
            }
        )
        await sender.edit_or_reply(f"result:{load_result.element.qualified_name}")

    async def reply_for_unresolved(self, sender: Any, qualified_name: str) -> None:
        self.unresolved.append(qualified_name)
        await sender.edit_or_reply(f"unresolved:{qualified_name}")


def candidate(
    name: str, *, exact: bool = False, case_sensitive_exact: bool = False
) -> FuzzyQueryResult:
    return FuzzyQueryResult(
        qualified_name=name, exact=exact, case_sensitive_exact=case_sensitive_exact
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> InteractionStore:
    return InteractionStore(ttl_seconds=900, clock=clock)


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture()
def query_api() -> FakeQueryApi:
    return FakeQueryApi()


@pytest.fixture()
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture()
def result_sender() -> RecordingResultSender:
    return RecordingResultSender()


def build_executor(
    *,
    query_api: FakeQueryApi,
    loader: FakeLoader,
    store: InteractionStore,
    result_sender: Optional[Any] = None,
) -> Executor:
    if result_sender is None:
        result_sender = TextDocResultSender()
    resolver = DisambiguationResolver(
        query_api=query_api,
        loader=loader,
        result_sender=result_sender,
        store=store,
        command_name=DocCommand.name,
    )
    return Executor(
        [DocCommand(resolver=resolver, store=store, result_sender=result_sender)]
    )


@pytest.fixture()
def executor(
    query_api: FakeQueryApi,
    loader: FakeLoader,
    store: InteractionStore,
    result_sender: RecordingResultSender,
) -> Executor:
    return build_executor(
        query_api=query_api, loader=loader, store=store, result_sender=result_sender
    )


@pytest.fixture()
def make_candidate():
    return candidate


@pytest.fixture()
def sender_factory():
    return RecordingSender


@pytest.fixture()
def text_executor(
    query_api: FakeQueryApi, loader: FakeLoader, store: InteractionStore
) -> Executor:
    """Executor that renders answers with the real plain-text result sender."""
    return build_executor(query_api=query_api, loader=loader, store=store)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """The bot is built on asyncio; run anyio-marked tests on that backend only."""
    return "asyncio"
