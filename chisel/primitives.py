"""Scoping operators and leaf extraction primitives.

Scoping (chroot, chroots) narrows the range a scraper sees to the sub-ranges a
selector matches. Leaf primitives read values out of matched sub-ranges:

| single         | all             | reads                                   |
|----------------|-----------------|-----------------------------------------|
| text           | texts           | character data of the match             |
| html           | htmls           | markup of the match                     |
| inner_html     | inner_htmls     | markup of the match minus its boundary  |
| attr           | attrs           | one attribute of the match's head       |

The single form fails when nothing matches. So does the all form: an empty
match list is a failure, not an empty-list success. chroots is the one
exception and always succeeds.

Selectors are converted when the scraper is built, so an invalid selector
string raises SelectorSyntaxError at that point rather than during a scrape.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from chisel.common.render import inner_text, render_tags
from chisel.common.select import select, select_tags
from chisel.common.selector import SelectorLike, to_selector
from chisel.data_types import IndexedRange, TagOpen, TokenRange
from chisel.scraper import NO_RESULT, Scraper, NoResult

T = TypeVar("T")


def _describe(selector: SelectorLike) -> str:
    if isinstance(selector, str):
        return repr(selector)
    return repr(str(to_selector(selector)))


# =============================================================================
# Scoping
# =============================================================================


def chroot(selector: SelectorLike, inner: Scraper[T]) -> Scraper[T]:
    """Run ``inner`` against the first sub-range matching ``selector``.

    The inner scraper sees that sub-range as the entire document. Only the
    first match is considered, however many there are; use chroots for all
    of them.

    Args:
        selector: Anything selector-like.
        inner: Scraper to run inside the match.

    Returns:
        A scraper that fails when nothing matches, and otherwise yields
        whatever ``inner`` yields on the first match.
    """
    compiled = to_selector(selector)

    def scoped(tokens: IndexedRange) -> T | NoResult:
        matches = select(compiled, tokens)
        if not matches:
            return NO_RESULT
        return inner.evaluate(matches[0])

    return Scraper(scoped, f"chroot({_describe(selector)}, {inner.name})")


def chroots(selector: SelectorLike, inner: Scraper[T]) -> Scraper[list[T]]:
    """Run ``inner`` against every sub-range matching ``selector``.

    Results are collected in document order. Sub-ranges where ``inner`` fails
    are left out.

    Args:
        selector: Anything selector-like.
        inner: Scraper to run inside each match.

    Returns:
        A scraper that always succeeds, with an empty list when nothing
        matched or ``inner`` failed everywhere.
    """
    compiled = to_selector(selector)

    def scoped(tokens: IndexedRange) -> list[T]:
        results = []
        for match in select(compiled, tokens):
            result = inner.evaluate(match)
            if result is not NO_RESULT:
                results.append(result)
        return results

    return Scraper(scoped, f"chroots({_describe(selector)}, {inner.name})")


# =============================================================================
# Leaf extraction
# =============================================================================


def _with_head(
    selector: SelectorLike,
    extract: Callable[[TokenRange], T | NoResult],
    label: str,
) -> Scraper[T]:
    compiled = to_selector(selector)

    def single(tokens: IndexedRange) -> T | NoResult:
        matches = select_tags(compiled, tokens)
        if not matches:
            return NO_RESULT
        return extract(matches[0])

    return Scraper(single, f"{label}{_describe(selector)})")


def _with_all(
    selector: SelectorLike,
    extract: Callable[[TokenRange], T | NoResult],
    label: str,
) -> Scraper[list[T]]:
    compiled = to_selector(selector)

    def every(tokens: IndexedRange) -> list[T] | NoResult:
        matches = select_tags(compiled, tokens)
        if not matches:
            return NO_RESULT
        results = []
        for match in matches:
            value = extract(match)
            if value is not NO_RESULT:
                results.append(value)
        return results

    return Scraper(every, f"{label}{_describe(selector)})")


def _inner_markup(tags: TokenRange) -> str:
    if len(tags) < 2:
        return ""
    return render_tags(tags[1:-1])


def _attribute(name: str) -> Callable[[TokenRange], str | NoResult]:
    def extract(tags: TokenRange) -> str | NoResult:
        if not tags or not isinstance(tags[0], TagOpen):
            return NO_RESULT
        value = tags[0].get_attribute(name)
        return NO_RESULT if value is None else value

    return extract


def text(selector: SelectorLike) -> Scraper[str]:
    """Text of the first match: its text tokens, concatenated."""
    return _with_head(selector, inner_text, "text(")


def texts(selector: SelectorLike) -> Scraper[list[str]]:
    """Text of every match, in document order."""
    return _with_all(selector, inner_text, "texts(")


def html(selector: SelectorLike) -> Scraper[str]:
    """Markup of the first match, including its own open and close tags."""
    return _with_head(selector, render_tags, "html(")


def htmls(selector: SelectorLike) -> Scraper[list[str]]:
    """Markup of every match, in document order."""
    return _with_all(selector, render_tags, "htmls(")


def inner_html(selector: SelectorLike) -> Scraper[str]:
    """Markup inside the first match, without its boundary tokens.

    A match of fewer than two tokens has no interior and yields ``""``.
    """
    return _with_head(selector, _inner_markup, "inner_html(")


def inner_htmls(selector: SelectorLike) -> Scraper[list[str]]:
    """Markup inside every match, in document order."""
    return _with_all(selector, _inner_markup, "inner_htmls(")


def attr(name: str, selector: SelectorLike) -> Scraper[str]:
    """Value of attribute ``name`` on the first match.

    Fails when nothing matches, or when the first match lacks the attribute.
    Later matches are never consulted.
    """
    return _with_head(selector, _attribute(name), f"attr({name!r}, ")


def attrs(name: str, selector: SelectorLike) -> Scraper[list[str]]:
    """Values of attribute ``name`` on every match that carries it.

    Still fails when nothing matches at all; matches without the attribute
    are skipped, so the list may be empty.
    """
    return _with_all(selector, _attribute(name), f"attrs({name!r}, ")
