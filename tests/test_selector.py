"""Tests for the selector model and CSS-subset parsing."""

import re

import pytest

from chisel.common.exceptions import SelectorSyntaxError
from chisel.common.selector import (
    AttributeContainsWord,
    AttributeEquals,
    AttributeMatches,
    AttributePrefix,
    AttributeSubstring,
    AttributeSuffix,
    Axis,
    HasAttribute,
    SelectNode,
    Selector,
    any_tag,
    parse_selector,
    tag,
    to_selector,
)
from chisel.data_types import TagOpen


class TestParseSelector:
    """Tests for parse_selector."""

    def test_type_selector(self):
        """parse_selector shall turn a bare name into a single node."""
        assert parse_selector("p") == Selector((SelectNode("p"),))

    def test_universal_selector(self):
        """parse_selector shall turn '*' into an any-tag node."""
        assert parse_selector("*") == Selector((SelectNode(None),))

    def test_class_id_and_attributes(self):
        """parse_selector shall keep compound predicates in source order."""
        selector = parse_selector("a#next.pager[href^='/']")

        assert selector.nodes == (
            SelectNode(
                "a",
                (
                    AttributeEquals("id", "next"),
                    AttributeContainsWord("class", "pager"),
                    AttributePrefix("href", "/"),
                ),
            ),
        )

    def test_attribute_operators(self):
        """parse_selector shall support the exists, =, ~=, ^=, $= and *= operators."""
        node = parse_selector(
            "a[title][rel=next][class~=x][href^=h][href$=l][href*=m]"
        ).nodes[0]

        assert node.predicates == (
            HasAttribute("title"),
            AttributeEquals("rel", "next"),
            AttributeContainsWord("class", "x"),
            AttributePrefix("href", "h"),
            AttributeSuffix("href", "l"),
            AttributeSubstring("href", "m"),
        )

    def test_combinators(self):
        """parse_selector shall map space to descendant and '>' to child."""
        selector = parse_selector("table.cases > tr td")

        assert [node.tag for node in selector.nodes] == ["table", "tr", "td"]
        assert selector.axes == (Axis.CHILD, Axis.DESCENDANT)

    def test_names_are_lower_cased(self):
        """parse_selector shall lower-case element and attribute names."""
        node = parse_selector("DIV[DATA-ID]").nodes[0]

        assert node == SelectNode("div", (HasAttribute("data-id"),))

    @pytest.mark.parametrize(
        "css",
        ["a:first-child", "a, b", "h1 + p", "h1 ~ p", "p::text", "div["],
    )
    def test_unsupported_selectors_raise(self, css):
        """parse_selector shall reject selectors outside the supported subset."""
        with pytest.raises(SelectorSyntaxError) as exc_info:
            parse_selector(css)

        assert exc_info.value.selector == css

    def test_syntax_error_is_value_error(self):
        """SelectorSyntaxError shall also be a ValueError."""
        with pytest.raises(ValueError):
            parse_selector("div[")


class TestBuilders:
    """Tests for the programmatic selector builders."""

    def test_tag_with_class_and_attributes(self):
        """tag() shall build a node with class and attribute predicates."""
        node = tag("A", class_="pager", rel="next")

        assert node == SelectNode(
            "a",
            (
                AttributeContainsWord("class", "pager"),
                AttributeEquals("rel", "next"),
            ),
        )

    def test_descendant_operator_matches_css(self):
        """'//' shall build the same selector as a descendant combinator."""
        assert tag("div") // tag("p") == parse_selector("div p")
        assert tag("div") // "p" == parse_selector("div p")

    def test_child_matches_css(self):
        """child() shall build the same selector as the '>' combinator."""
        assert tag("div").child(tag("p")) == parse_selector("div > p")

    def test_chains_are_flattened(self):
        """Joining selectors shall keep one axis between each pair of nodes."""
        selector = (tag("ul") // "li").child(tag("a"))

        assert len(selector.nodes) == 3
        assert selector.axes == (Axis.DESCENDANT, Axis.CHILD)

    def test_str_renders_css(self):
        """str() shall render a selector in CSS form."""
        selector = tag("div", class_="box").child(any_tag().with_attr("id", "x"))

        assert str(selector) == "div.box > #x"

    def test_attr_matches_uses_regex_search(self):
        """attr_matches() shall match when the regex is found anywhere in the value."""
        node = tag("a").attr_matches("href", r"/dockets/\d+$")

        assert node.predicates == (
            AttributeMatches("href", re.compile(r"/dockets/\d+$")),
        )
        assert node.matches(TagOpen("a", (("href", "/dockets/12"),)))
        assert not node.matches(TagOpen("a", (("href", "/dockets/x"),)))

    def test_empty_selector_is_rejected(self):
        """Selector shall require at least one node."""
        with pytest.raises(ValueError):
            Selector(())


class TestNodeMatching:
    """Tests for SelectNode.matches."""

    def test_class_matches_whole_words(self):
        """A class predicate shall match one of the whitespace-separated classes."""
        node = tag("div", class_="box")

        assert node.matches(TagOpen("div", (("class", "big box"),)))
        assert not node.matches(TagOpen("div", (("class", "boxes"),)))

    def test_tag_name_must_match(self):
        """A named node shall not match a different element."""
        assert not tag("p").matches(TagOpen("div"))
        assert any_tag().matches(TagOpen("div"))

    def test_empty_prefix_never_matches(self):
        """An empty prefix, suffix or substring shall never match."""
        open_tag = TagOpen("a", (("href", "/x"),))

        assert not SelectNode("a", (AttributePrefix("href", ""),)).matches(open_tag)
        assert not SelectNode("a", (AttributeSuffix("href", ""),)).matches(open_tag)
        assert not SelectNode("a", (AttributeSubstring("href", ""),)).matches(open_tag)


class TestToSelector:
    """Tests for to_selector."""

    def test_accepts_strings_nodes_and_selectors(self):
        """to_selector shall accept strings, nodes and selectors alike."""
        expected = Selector((SelectNode("p"),))

        assert to_selector("p") == expected
        assert to_selector(tag("p")) == expected
        assert to_selector(expected) is expected

    def test_accepts_custom_selectables(self):
        """to_selector shall accept any object with a to_selector method."""

        class Headline:
            def to_selector(self):
                return tag("h1").to_selector()

        assert to_selector(Headline()) == parse_selector("h1")

    def test_rejects_other_values(self):
        """to_selector shall raise TypeError for values that are not selector-like."""
        with pytest.raises(TypeError):
            to_selector(42)
