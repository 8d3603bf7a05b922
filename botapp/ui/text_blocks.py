"""Reusable helpers for composing Markdown messages."""

from __future__ import annotations
from tracking import t

from typing import List
from telegram.helpers import escape_markdown


def escape_telegram_markdown(text: object) -> str:
    """Escape text for the legacy Telegram Markdown parse mode used by alerts."""
    t('botapp.ui.text_blocks.escape_telegram_markdown')
    return escape_markdown(str(text), version=1)


def bold_telegram_text(text: object) -> str:
    """Return bold Telegram Markdown text."""
    t('botapp.ui.text_blocks.bold_telegram_text')
    return f"*{escape_telegram_markdown(text)}*"


def markdown_link(label: str, url: str) -> str:
    """Inline link; ``url`` must already be percent-encoded."""
    t('botapp.ui.text_blocks.markdown_link')
    return f"[{label}]({url})"


class MarkdownBlockBuilder:
    """Utility for building Markdown messages line by line."""

    __slots__ = ("_lines",)

    def __init__(self) -> None:
        t("botapp.ui.text_blocks.MarkdownBlockBuilder.__init__")
        self._lines: List[str] = []

    def line(self, text: str = "") -> "MarkdownBlockBuilder":
        t('botapp.ui.text_blocks.MarkdownBlockBuilder.line')
        self._lines.append(text)
        return self

    def heading(self, text: str) -> "MarkdownBlockBuilder":
        t('botapp.ui.text_blocks.MarkdownBlockBuilder.heading')
        if text:
            self._lines.append(text)
        return self

    def field(self, label: str, value: object) -> "MarkdownBlockBuilder":
        """Append ``*Label:* value`` with the value escaped; skipped when empty."""
        t('botapp.ui.text_blocks.MarkdownBlockBuilder.field')
        if value is None or value == "":
            return self
        self._lines.append(f"{bold_telegram_text(label + ':')} {escape_telegram_markdown(value)}")
        return self

    def blank(self) -> "MarkdownBlockBuilder":
        t('botapp.ui.text_blocks.MarkdownBlockBuilder.blank')
        self._lines.append("")
        return self

    def build(self) -> str:
        t('botapp.ui.text_blocks.MarkdownBlockBuilder.build')
        return "\n".join(self._lines)


class MarkdownBuilderBase:
    """Shared base for components that construct Markdown via builders."""

    def __init__(self, builder_factory=MarkdownBlockBuilder) -> None:
        t("botapp.ui.text_blocks.MarkdownBuilderBase.__init__")
        self._builder_factory = builder_factory

    def create_builder(self) -> MarkdownBlockBuilder:
        """Return a new builder instance for composing Markdown output."""
        t('botapp.ui.text_blocks.MarkdownBuilderBase.create_builder')

        return self._builder_factory()


__all__ = [
    "MarkdownBlockBuilder",
    "MarkdownBuilderBase",
    "escape_telegram_markdown",
    "bold_telegram_text",
    "markdown_link",
]
