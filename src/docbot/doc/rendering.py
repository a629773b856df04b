"""Plain-text replies for Javadoc results and choice prompts."""

from __future__ import annotations

from typing import Optional, Protocol

from ..commands.sources import (
    Choice,
    ChoicePrompt,
    CommandSource,
    MessageSender,
    OutgoingMessage,
)
from ..state import ActiveInteraction
from .markdown import format_bold, format_code_block, format_inline_code, truncate_text
from .query import DocElement, FuzzyQueryResult, LoadResult

NO_RESULT_MESSAGE = "I couldn't find any result for '{query}'."
AMBIGUOUS_LOAD_MESSAGE = "I found multiple elements for this qualified name."

DEFAULT_MAX_MESSAGE_LENGTH = 2000
MAX_BUTTON_CHOICES = 5
MAX_PROMPT_CHOICES = 25


class DocResultSender(Protocol):
    async def reply_with_result(
        self,
        source: CommandSource,
        sender: MessageSender,
        load_result: LoadResult,
        *,
        short_description: bool,
        omit_tags: bool,
        query_seconds: float,
    ) -> None: ...

    async def reply_for_unresolved(
        self, sender: MessageSender, qualified_name: str
    ) -> None: ...


def encode_button_payload(command_name: str, choice_id: int, interaction_id: str) -> str:
    return f"{command_name} {choice_id} {interaction_id}"


def encode_menu_payload(command_name: str, interaction_id: str) -> str:
    return f"{command_name} {interaction_id}"


def render_element(
    element: DocElement, *, short_description: bool, omit_tags: bool
) -> str:
    parts = [format_bold(element.qualified_name)]
    if element.declaration:
        parts.append(format_code_block(element.declaration, "java"))
    body = element.summary if short_description else element.description
    if not body:
        body = element.summary or element.description
    if body:
        parts.append(body.strip())
    if not omit_tags and element.tags:
        parts.append(
            "\n".join(f"{format_bold(name)}: {text}" for name, text in element.tags)
        )
    if element.url:
        parts.append(f"<{element.url}>")
    return "\n\n".join(parts)


def build_choice_prompt(
    command_name: str,
    interaction: ActiveInteraction,
    query: str,
    *,
    total_results: Optional[int] = None,
) -> OutgoingMessage:
    """List every stored choice; more than five become a menu.

    ``total_results`` is the candidate count before it was capped at
    :data:`MAX_PROMPT_CHOICES`.
    """
    choices = tuple(
        Choice(
            choice_id=choice_id,
            label=_choice_label(choice),
            payload=encode_button_payload(
                command_name, choice_id, interaction.interaction_id
            ),
        )
        for choice_id, choice in enumerate(interaction.choices)
    )
    total = max(total_results or 0, len(choices))
    lines = [f"I found {total} results for {format_inline_code(query)}."]
    if total > len(choices):
        lines.append(f"Only the first {len(choices)} can be picked.")
    lines.append("Which one did you mean?")
    lines.extend(
        f"{format_inline_code(str(choice.choice_id))} {choice.label}"
        for choice in choices
    )
    prompt = ChoicePrompt(
        choices=choices,
        menu_payload=encode_menu_payload(command_name, interaction.interaction_id),
        as_menu=len(choices) > MAX_BUTTON_CHOICES,
    )
    return OutgoingMessage(
        content=truncate_text("\n".join(lines), DEFAULT_MAX_MESSAGE_LENGTH),
        choices=prompt,
    )


def _choice_label(choice: object) -> str:
    if isinstance(choice, FuzzyQueryResult):
        return choice.qualified_name
    return str(choice)


class TextDocResultSender:
    """Renders elements as chat markdown text."""

    def __init__(
        self,
        *,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
        link_base_url: Optional[str] = None,
    ) -> None:
        self._max_message_length = max_message_length
        self._link_base_url = link_base_url.rstrip("/") if link_base_url else None

    async def reply_with_result(
        self,
        source: CommandSource,
        sender: MessageSender,
        load_result: LoadResult,
        *,
        short_description: bool,
        omit_tags: bool,
        query_seconds: float,
    ) -> None:
        text = render_element(
            load_result.element,
            short_description=short_description,
            omit_tags=omit_tags,
        )
        footer = f"*Query took {query_seconds * 1000:.0f} ms*"
        content = truncate_text(text, self._max_message_length - len(footer) - 2)
        await sender.edit_or_reply(OutgoingMessage(content=f"{content}\n\n{footer}"))

    async def reply_for_unresolved(
        self, sender: MessageSender, qualified_name: str
    ) -> None:
        lines = [format_bold(qualified_name)]
        if self._link_base_url:
            path = qualified_name.split("#", 1)[0].replace(".", "/")
            lines.append(f"<{self._link_base_url}/{path}.html>")
        else:
            lines.append("No documentation is stored for this element.")
        await sender.edit_or_reply(OutgoingMessage(content="\n".join(lines)))
