"""Chat markdown helpers for rendered answers."""

from __future__ import annotations

import re
from typing import Final

TRUNCATION_SUFFIX: Final[str] = "\n..."

_MARKDOWN_ESCAPE_RE = re.compile(r"([*_~`>|{}\\])")


def escape_markdown(text: str) -> str:
    if not text:
        return ""
    return _MARKDOWN_ESCAPE_RE.sub(r"\\\1", text)


def escape_code(text: str) -> str:
    if not text:
        return ""
    return text.replace("\\", "\\\\").replace("`", "\\`")


def format_code_block(code: str, language: str = "") -> str:
    if not code:
        return "```\n```"
    escaped = code.replace("```", "\\`\\`\\`")
    if language:
        return f"```{language}\n{escaped}\n```"
    return f"```\n{escaped}\n```"


def format_inline_code(code: str) -> str:
    if not code:
        return "``"
    return f"`{escape_code(code)}`"


def format_bold(text: str) -> str:
    if not text:
        return "****"
    return f"**{escape_markdown(text)}**"


def truncate_text(text: str, max_len: int) -> str:
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    keep = max(max_len - len(TRUNCATION_SUFFIX), 0)
    head = text[:keep]
    # Close a code fence cut in half so the rest of the message renders.
    if head.count("```") % 2 == 1:
        closing = "\n```"
        head = text[: max(keep - len(closing), 0)] + closing
    return head + TRUNCATION_SUFFIX
