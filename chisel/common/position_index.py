"""Position index over a token list.

Each token is paired with the distance to its matching close tag, so the
sub-range covered by an element starting at position ``i`` is simply
``tokens[i : i + offset + 1]``. No tree is ever built.

Example::

    tags = parse_tags("<div><p>Hi</p></div>")
    indexed = tag_with_offset(tags)
    # [(TagOpen('div'), 4), (TagOpen('p'), 2), (TagText('Hi'), 0),
    #  (TagClose('p'), 0), (TagClose('div'), 0)]
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from chisel.data_types import (
    IndexedRange,
    IndexedToken,
    TagClose,
    TagOpen,
    Token,
)


def tag_with_offset(tags: Sequence[Token]) -> list[IndexedToken]:
    """Annotate every token with the offset to its structural match.

    A single left-to-right pass keeps one stack of open positions per element
    name; each close pops the most recent open element of the same name.
    Opening elements that never meet their close keep offset 0, as do all
    other tokens. Offsets are only guaranteed to nest correctly on canonical
    input (see canonicalize_tags).

    Args:
        tags: Tokens in document order.

    Returns:
        List of IndexedToken, same length and order as ``tags``.
    """
    offsets = [0] * len(tags)
    open_positions: defaultdict[str, list[int]] = defaultdict(list)

    for position, tag in enumerate(tags):
        if isinstance(tag, TagOpen):
            open_positions[tag.name].append(position)
        elif isinstance(tag, TagClose):
            pending = open_positions.get(tag.name)
            if pending:
                start = pending.pop()
                offsets[start] = position - start

    return [
        IndexedToken(tag, offset) for tag, offset in zip(tags, offsets)
    ]


def subrange_end(tokens: IndexedRange, start: int) -> int:
    """Return the exclusive end of the sub-range that starts at ``start``.

    An opening element spans through its matching close; any other token
    spans only itself.
    """
    return start + tokens[start].offset + 1
