"""
Declarative scrapers over markup token streams.

Scrapers are small, composable, reusable values. Each one describes how to
pull a value out of a range of markup tokens, and either produces it or fails.
They are combined with map, apply, bind and first-success choice, scoped to
selector matches with chroot/chroots, and bottom out in the text, html,
inner_html and attr primitives.

Example::

    from chisel import attr, chroots, lift, scrape_string, text

    comments = chroots(
        "div.comment",
        lift(lambda author, body: (author, body), text("span.author"), text("p")),
    )
    scrape_string(comments, markup)
"""

from chisel.common.config import ParseOptions
from chisel.common.exceptions import (
    ChiselError,
    MarkupParseError,
    ScrapeFailedError,
    SelectorSyntaxError,
)
from chisel.common.position_index import tag_with_offset
from chisel.common.render import inner_text, render_tags
from chisel.common.select import select, select_tags
from chisel.common.selector import (
    Selectable,
    SelectNode,
    Selector,
    any_tag,
    tag,
    to_selector,
)
from chisel.common.tokenizer import canonicalize_tags, parse_tags
from chisel.data_types import (
    IndexedToken,
    TagClose,
    TagComment,
    TagOpen,
    TagOther,
    TagText,
    Token,
)
from chisel.primitives import (
    attr,
    attrs,
    chroot,
    chroots,
    html,
    htmls,
    inner_html,
    inner_htmls,
    text,
    texts,
)
from chisel.scraper import (
    NO_RESULT,
    Scraper,
    fail,
    first_of,
    lift,
    scrape,
    scrape_or_raise,
    scrape_string,
    succeed,
)

__all__ = [
    "NO_RESULT",
    "ChiselError",
    "IndexedToken",
    "MarkupParseError",
    "ParseOptions",
    "ScrapeFailedError",
    "Scraper",
    "Selectable",
    "SelectNode",
    "Selector",
    "SelectorSyntaxError",
    "TagClose",
    "TagComment",
    "TagOpen",
    "TagOther",
    "TagText",
    "Token",
    "any_tag",
    "attr",
    "attrs",
    "canonicalize_tags",
    "chroot",
    "chroots",
    "fail",
    "first_of",
    "html",
    "htmls",
    "inner_html",
    "inner_htmls",
    "inner_text",
    "lift",
    "parse_tags",
    "render_tags",
    "scrape",
    "scrape_or_raise",
    "scrape_string",
    "select",
    "select_tags",
    "succeed",
    "tag",
    "tag_with_offset",
    "text",
    "texts",
    "to_selector",
]
