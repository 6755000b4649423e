"""Query matching over indexed token ranges.

Given a selector and an indexed range, find every sub-range whose head is an
opening element matched by the selector. Two flavours are provided:

- select() keeps the position index, so the sub-ranges can be scraped again
  (this is what chroot and chroots use);
- select_tags() strips it, for leaf extraction that only reads tokens.

Matching rules:

1. The first node may match any opening element of the range, the range's own
   head included.
2. Each following node is searched strictly inside the previous match (its
   boundary tokens excluded); the child axis only accepts elements at the top
   level of that interior.
3. Results are unique by start position and in document order. Nested
   genuine matches (a ``div`` inside a ``div`` for ``"div"``) are all kept.
"""

from __future__ import annotations

import logging

from chisel.common.position_index import subrange_end
from chisel.common.selector import Axis, Selector, SelectorLike, to_selector
from chisel.data_types import (
    IndexedRange,
    TagClose,
    TagOpen,
    Token,
    strip_offsets,
)

logger = logging.getLogger(__name__)


def select(selector: SelectorLike, tokens: IndexedRange) -> list[IndexedRange]:
    """Find matching sub-ranges, keeping the position index.

    Args:
        selector: Anything selector-like.
        tokens: The range to search.

    Returns:
        Matching sub-ranges in document order. Empty if nothing matched.
    """
    compiled = to_selector(selector)
    starts = _match_starts(compiled, tokens)

    logger.debug(
        "Selector '%s' matched %d of %d tokens",
        compiled,
        len(starts),
        len(tokens),
    )
    return [tokens[start : subrange_end(tokens, start)] for start in starts]


def select_tags(selector: SelectorLike, tokens: IndexedRange) -> list[list[Token]]:
    """Find matching sub-ranges as plain token lists.

    Same matches, same order as select(); only the offsets are dropped.
    """
    return [strip_offsets(match) for match in select(selector, tokens)]


def _match_starts(selector: Selector, tokens: IndexedRange) -> list[int]:
    found: set[int] = set()
    _search(selector, 0, tokens, 0, len(tokens), found, set())
    return sorted(found)


def _search(
    selector: Selector,
    node_index: int,
    tokens: IndexedRange,
    low: int,
    high: int,
    found: set[int],
    searched: set[tuple[int, int]],
) -> None:
    """Search ``tokens[low:high]`` for ``selector.nodes[node_index]``.

    Matches of the last node are added to ``found``; matches of any other node
    recurse into the interior of the matched element. An element interior is
    searched at most once per node, however many ancestors lead to it.
    """
    node = selector.nodes[node_index]
    children_only = (
        node_index > 0 and selector.axes[node_index - 1] is Axis.CHILD
    )
    is_last = node_index == len(selector.nodes) - 1

    depth = 0
    for position in range(low, high):
        indexed = tokens[position]
        token = indexed.token

        if isinstance(token, TagOpen):
            if (not children_only or depth == 0) and node.matches(token):
                if is_last:
                    found.add(position)
                elif indexed.offset and (node_index + 1, position) not in searched:
                    searched.add((node_index + 1, position))
                    _search(
                        selector,
                        node_index + 1,
                        tokens,
                        position + 1,
                        position + indexed.offset,
                        found,
                        searched,
                    )
            if indexed.offset:
                depth += 1
        elif isinstance(token, TagClose) and depth:
            depth -= 1
