"""Rendering token ranges back to text.

render_tags writes markup, inner_text concatenates character data. Both are
pure functions of the token range; neither looks at offsets.
"""

from __future__ import annotations

from html import escape

from lxml.html.defs import empty_tags

from chisel.data_types import (
    TagClose,
    TagComment,
    TagOpen,
    TagOther,
    TagText,
    TokenRange,
)

# Elements whose character data is written back without escaping.
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


def render_tags(tags: TokenRange) -> str:
    """Render a token range as markup.

    Text is escaped except inside ``script`` and ``style``. Void elements are
    written as a bare open tag (``<br>``) and their close tag is omitted.

    Args:
        tags: Tokens in document order.

    Returns:
        The markup string.
    """
    parts: list[str] = []
    raw_depth = 0

    for tag in tags:
        match tag:
            case TagOpen(name=name, attributes=attributes):
                rendered_attributes = "".join(
                    f' {key}="{escape(value, quote=True)}"'
                    for key, value in attributes
                )
                parts.append(f"<{name}{rendered_attributes}>")
                if name in RAW_TEXT_ELEMENTS:
                    raw_depth += 1
            case TagClose(name=name):
                if name in RAW_TEXT_ELEMENTS and raw_depth:
                    raw_depth -= 1
                if name not in empty_tags:
                    parts.append(f"</{name}>")
            case TagText(text=text):
                parts.append(text if raw_depth else escape(text, quote=False))
            case TagComment(text=text):
                parts.append(f"<!--{text}-->")
            case TagOther(text=text):
                parts.append(text)

    return "".join(parts)


def inner_text(tags: TokenRange) -> str:
    """Concatenate the character data of every text token in the range."""
    return "".join(tag.text for tag in tags if isinstance(tag, TagText))
