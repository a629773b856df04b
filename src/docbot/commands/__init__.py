"""Command model, argument context and dispatch."""

from .base import Command, SlashCommandData, SlashOption
from .context import CommandContext, CommandParseError
from .executor import CommandRegistrationError, Executor
from .sources import (
    ButtonCommandSource,
    Choice,
    ChoicePrompt,
    CommandSource,
    ComponentCommandSource,
    MessageCommandSource,
    MessageContent,
    MessageSender,
    OutgoingMessage,
    SelectionMenuCommandSource,
    SlashCommandSource,
)

__all__ = [
    "ButtonCommandSource",
    "Choice",
    "ChoicePrompt",
    "Command",
    "CommandContext",
    "CommandParseError",
    "CommandRegistrationError",
    "CommandSource",
    "ComponentCommandSource",
    "Executor",
    "MessageCommandSource",
    "MessageContent",
    "MessageSender",
    "OutgoingMessage",
    "SelectionMenuCommandSource",
    "SlashCommandData",
    "SlashCommandSource",
    "SlashOption",
]
