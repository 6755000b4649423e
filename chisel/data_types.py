"""Token data types for the scraper engine.

This module defines the flat token model every other part of chisel works
over. Markup is never kept as a tree: it is a list of tokens, and structure is
recovered from the position index (see chisel.common.position_index).

These types are designed to be:

1. Exhaustive - Token is a closed union, so ``match`` statements can cover it
2. Immutable - Frozen dataclasses, safe to share between scrapers and threads
3. Comparable - Tokens compare and hash by value
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NamedTuple, TypeAlias


@dataclass(frozen=True)
class TagOpen:
    """An opening element, e.g. ``<a href="/x">``.

    Attributes:
        name: Lower-case element name.
        attributes: Attribute (name, value) pairs in document order.
    """

    name: str
    attributes: tuple[tuple[str, str], ...] = field(default=())

    def get_attribute(self, name: str) -> str | None:
        """Look up an attribute value.

        Args:
            name: Attribute name (compared case-insensitively).

        Returns:
            The value of the first attribute with that name, or None.
        """
        wanted = name.lower()
        for key, value in self.attributes:
            if key == wanted:
                return value
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None


@dataclass(frozen=True)
class TagClose:
    """A closing element, e.g. ``</a>``."""

    name: str


@dataclass(frozen=True)
class TagText:
    """A run of character data, entities already decoded."""

    text: str


@dataclass(frozen=True)
class TagComment:
    """A markup comment, without the ``<!--`` and ``-->`` delimiters."""

    text: str


@dataclass(frozen=True)
class TagOther:
    """Anything else the tokenizer keeps (doctype, processing instruction).

    The text is stored already rendered and is written back verbatim.
    """

    text: str


Token: TypeAlias = TagOpen | TagClose | TagText | TagComment | TagOther


class IndexedToken(NamedTuple):
    """A token paired with the distance to its structural match.

    Attributes:
        token: The token itself.
        offset: Number of positions forward to the matching TagClose. Zero for
            every token that is not an opening element, and for an opening
            element that has no match.
    """

    token: Token
    offset: int


IndexedRange: TypeAlias = Sequence[IndexedToken]
TokenRange: TypeAlias = Sequence[Token]


def strip_offsets(tokens: IndexedRange) -> list[Token]:
    """Drop the position index from a range."""
    return [indexed.token for indexed in tokens]
