"""Tests for the position index."""

from chisel.common.position_index import subrange_end, tag_with_offset
from chisel.common.tokenizer import parse_tags
from chisel.data_types import (
    IndexedToken,
    TagClose,
    TagOpen,
    TagText,
    strip_offsets,
)


class TestTagWithOffset:
    """Tests for tag_with_offset."""

    def test_offsets_point_at_matching_close(self):
        """tag_with_offset shall give each open tag the distance to its close."""
        indexed = tag_with_offset(parse_tags("<div><p>Hi</p></div>"))

        assert [item.offset for item in indexed] == [4, 2, 0, 0, 0]

    def test_every_open_lands_on_its_close(self, nested_tokens):
        """tag_with_offset shall land every open tag exactly on a close of the same name."""
        for position, item in enumerate(nested_tokens):
            if isinstance(item.token, TagOpen):
                target = nested_tokens[position + item.offset].token
                assert target == TagClose(item.token.name)

    def test_unmatched_open_keeps_zero(self):
        """tag_with_offset shall leave an open tag with no close at offset 0."""
        indexed = tag_with_offset([TagOpen("img"), TagText("x")])

        assert indexed == [
            IndexedToken(TagOpen("img"), 0),
            IndexedToken(TagText("x"), 0),
        ]

    def test_same_name_nesting(self):
        """tag_with_offset shall pair nested same-name elements innermost first."""
        indexed = tag_with_offset(
            [TagOpen("div"), TagOpen("div"), TagClose("div"), TagClose("div")]
        )

        assert [item.offset for item in indexed] == [3, 1, 0, 0]

    def test_tokens_are_preserved(self, greeting_html):
        """tag_with_offset shall keep the tokens and their order."""
        tags = parse_tags(greeting_html)

        assert strip_offsets(tag_with_offset(tags)) == tags


class TestSubrangeEnd:
    """Tests for subrange_end."""

    def test_element_spans_through_close(self, greeting_tokens):
        """subrange_end shall include the matching close tag."""
        assert subrange_end(greeting_tokens, 0) == len(greeting_tokens)
        assert subrange_end(greeting_tokens, 1) == 4

    def test_other_tokens_span_themselves(self, greeting_tokens):
        """subrange_end shall cover only the token itself for non-open tokens."""
        assert subrange_end(greeting_tokens, 2) == 3
