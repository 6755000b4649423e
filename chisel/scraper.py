"""The Scraper combinator core.

A Scraper wraps a pure function from an indexed token range to either a value
or failure. Scrapers are not consuming parsers: there is no cursor and no
"rest of input". Every combinator hands the same full range to each of its
operands, and only chroot/chroots (see chisel.primitives) narrow it.

Failure is the only error channel. Inside the engine it is the NO_RESULT
sentinel, so ``succeed(None)`` is a genuine success; at the API boundary
(``Scraper.run``, ``scrape``, ``scrape_string``) it becomes ``None``.

Example::

    from chisel import attr, chroots, lift, scrape_string, text

    link = lift(
        lambda title, href: {"title": title, "href": href},
        text("a"),
        attr("href", "a"),
    )
    links = chroots("li", link)
    scrape_string(links, markup)
    # [{"title": "First", "href": "/1"}, ...]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, Final, Generic, TypeVar

from chisel.common.config import ParseOptions
from chisel.common.exceptions import ScrapeFailedError
from chisel.common.position_index import tag_with_offset
from chisel.common.tokenizer import canonicalize_tags, parse_tags
from chisel.data_types import IndexedRange, IndexedToken, Token

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
A = TypeVar("A")
B = TypeVar("B")


class NoResult:
    """Type of the failure sentinel."""

    def __repr__(self) -> str:
        return "NO_RESULT"


NO_RESULT: Final = NoResult()


def _callable_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


class Scraper(Generic[T]):
    """A reusable, stateless extraction over an indexed token range.

    Attributes:
        name: Short description used in ``repr`` and debug logging.
    """

    __slots__ = ("_evaluate", "name")

    def __init__(
        self,
        evaluate: Callable[[IndexedRange], T | NoResult],
        name: str = "scraper",
    ) -> None:
        """Initialize the scraper.

        Args:
            evaluate: Pure function from a range to a value or NO_RESULT.
            name: Short description used in ``repr`` and debug logging.
        """
        self._evaluate = evaluate
        self.name = name

    def evaluate(self, tokens: IndexedRange) -> T | NoResult:
        """Run against a range, returning NO_RESULT on failure."""
        return self._evaluate(tokens)

    def run(self, tokens: IndexedRange) -> T | None:
        """Run against an already indexed range.

        Returns:
            The value, or None if the scraper failed.
        """
        result = self._evaluate(tokens)
        return None if result is NO_RESULT else result

    def map(self, fn: Callable[[T], U]) -> Scraper[U]:
        """Apply ``fn`` to a successful result; failure passes through."""
        evaluate = self._evaluate

        def mapped(tokens: IndexedRange) -> U | NoResult:
            result = evaluate(tokens)
            if result is NO_RESULT:
                return NO_RESULT
            return fn(result)

        return Scraper(mapped, f"{self.name}.map({_callable_name(fn)})")

    def apply(
        self: Scraper[Callable[[A], B]], value: Scraper[A]
    ) -> Scraper[B]:
        """Apply the function this scraper produces to ``value``'s result.

        Both scrapers see the identical range. The value side runs first and
        the function side is skipped when it fails.
        """
        evaluate_function = self._evaluate
        evaluate_value = value._evaluate

        def applied(tokens: IndexedRange) -> B | NoResult:
            argument = evaluate_value(tokens)
            if argument is NO_RESULT:
                return NO_RESULT
            function = evaluate_function(tokens)
            if function is NO_RESULT:
                return NO_RESULT
            return function(argument)

        return Scraper(applied, f"{self.name}.apply({value.name})")

    def bind(self, fn: Callable[[T], Scraper[U]]) -> Scraper[U]:
        """Feed the result to ``fn`` and run the scraper it returns.

        The second scraper runs against the same range as the first, not a
        remainder of it.
        """
        evaluate = self._evaluate

        def bound(tokens: IndexedRange) -> U | NoResult:
            result = evaluate(tokens)
            if result is NO_RESULT:
                return NO_RESULT
            return fn(result).evaluate(tokens)

        return Scraper(bound, f"{self.name}.bind({_callable_name(fn)})")

    def or_else(self, other: Scraper[T]) -> Scraper[T]:
        """First-success choice.

        ``other`` is only evaluated when this scraper fails, and its result is
        then returned as is.
        """
        evaluate_left = self._evaluate
        evaluate_right = other._evaluate

        def choice(tokens: IndexedRange) -> T | NoResult:
            result = evaluate_left(tokens)
            if result is not NO_RESULT:
                return result
            return evaluate_right(tokens)

        return Scraper(choice, f"({self.name} | {other.name})")

    def __or__(self, other: Scraper[T]) -> Scraper[T]:
        return self.or_else(other)

    def optional(self, default: Any = None) -> Scraper[Any]:
        """Succeed with ``default`` where this scraper would fail."""
        return self.or_else(succeed(default))

    def where(self, predicate: Callable[[T], bool]) -> Scraper[T]:
        """Keep a result only when ``predicate`` holds for it."""
        evaluate = self._evaluate

        def guarded(tokens: IndexedRange) -> T | NoResult:
            result = evaluate(tokens)
            if result is NO_RESULT or not predicate(result):
                return NO_RESULT
            return result

        return Scraper(guarded, f"{self.name}.where({_callable_name(predicate)})")

    def __repr__(self) -> str:
        return f"<Scraper {self.name}>"


def succeed(value: T) -> Scraper[T]:
    """A scraper that always succeeds with ``value``."""
    return Scraper(lambda tokens: value, f"succeed({value!r})")


def fail() -> Scraper[Any]:
    """A scraper that always fails."""
    return Scraper(lambda tokens: NO_RESULT, "fail()")


def lift(fn: Callable[..., T], *scrapers: Scraper[Any]) -> Scraper[T]:
    """Combine several scrapers over the same range with ``fn``.

    Scrapers run left to right against the identical range; the first failure
    stops evaluation and fails the whole combination.

    Example::

        lift(Case, text("h1"), attr("href", "a.docket"))
    """
    evaluators = [scraper._evaluate for scraper in scrapers]

    def combined(tokens: IndexedRange) -> T | NoResult:
        values = []
        for evaluate in evaluators:
            value = evaluate(tokens)
            if value is NO_RESULT:
                return NO_RESULT
            values.append(value)
        return fn(*values)

    names = ", ".join(scraper.name for scraper in scrapers)
    return Scraper(combined, f"lift({_callable_name(fn)}, {names})")


def first_of(*scrapers: Scraper[T]) -> Scraper[T]:
    """First-success choice over any number of scrapers; fail() when empty."""
    if not scrapers:
        return fail()
    chosen = scrapers[-1]
    for scraper in reversed(scrapers[:-1]):
        chosen = scraper.or_else(chosen)
    return chosen


# =============================================================================
# Top-level evaluation
# =============================================================================


def _scrape_indexed(
    scraper: Scraper[T], tokens: list[IndexedToken]
) -> T | NoResult:
    result = scraper.evaluate(tokens)
    logger.debug(
        "Scraper %s %s on %d tags",
        scraper.name,
        "failed" if result is NO_RESULT else "succeeded",
        len(tokens),
    )
    return result


def _index(
    source: str | bytes | Sequence[Token], options: ParseOptions | None
) -> list[IndexedToken]:
    if isinstance(source, (str, bytes)):
        return tag_with_offset(parse_tags(source, options))
    return tag_with_offset(canonicalize_tags(source))


def scrape(scraper: Scraper[T], tags: Sequence[Token]) -> T | None:
    """Run a scraper over a token sequence.

    The tokens are canonicalized and indexed first. The result is
    all-or-nothing: any failure anywhere in the composition gives None.

    Args:
        scraper: The scraper to run.
        tags: Tokens in document order; need not be well formed.

    Returns:
        The scraped value, or None.
    """
    result = _scrape_indexed(scraper, _index(tags, None))
    return None if result is NO_RESULT else result


def scrape_string(
    scraper: Scraper[T],
    markup: str | bytes,
    options: ParseOptions | None = None,
) -> T | None:
    """Tokenize markup and run a scraper over it.

    Args:
        scraper: The scraper to run.
        markup: Raw markup.
        options: Tokenizer options.

    Returns:
        The scraped value, or None.

    Raises:
        MarkupParseError: If the markup cannot be tokenized.
    """
    result = _scrape_indexed(scraper, _index(markup, options))
    return None if result is NO_RESULT else result


def scrape_or_raise(
    scraper: Scraper[T],
    source: str | bytes | Sequence[Token],
    description: str,
    options: ParseOptions | None = None,
) -> T:
    """Like scrape/scrape_string, but a failed scrape is an error.

    Args:
        scraper: The scraper to run.
        source: Raw markup or a token sequence.
        description: What is being scraped, for the error message.
        options: Tokenizer options, used when ``source`` is markup.

    Returns:
        The scraped value.

    Raises:
        ScrapeFailedError: If the scraper produced no result.
    """
    tokens = _index(source, options)
    result = _scrape_indexed(scraper, tokens)
    if result is NO_RESULT:
        raise ScrapeFailedError(description, scraper.name, len(tokens))
    return result
