"""Selector model for token-range queries.

A Selector is a chain of SelectNodes. Each node tests a single opening
element (tag name plus attribute predicates); consecutive nodes are joined by
an axis saying whether the next node may match any descendant of the previous
match or only a direct child.

Selectors can be built three ways, and every API that takes a selector accepts
any of them:

- a CSS-subset string, parsed with cssselect::

      "div.listing > a[href]"

- the builder functions::

      tag("div", class_="listing").child(tag("a").with_attr("href"))

- any object with a ``to_selector()`` method (the Selectable protocol).

Supported CSS subset: type and universal selectors, ``.class``, ``#id``,
``[attr]``, ``[attr=v]``, ``[attr~=v]``, ``[attr^=v]``, ``[attr$=v]``,
``[attr*=v]``, and the descendant (space) and child (``>``) combinators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Protocol, TypeAlias, runtime_checkable

import cssselect
from cssselect.parser import (
    Attrib,
    Class,
    CombinedSelector,
    Element,
    Hash,
)

from chisel.common.exceptions import SelectorSyntaxError
from chisel.data_types import TagOpen


# =============================================================================
# Attribute predicates
# =============================================================================


@dataclass(frozen=True)
class HasAttribute:
    """``[name]``: the attribute is present, whatever its value."""

    name: str

    def matches(self, tag: TagOpen) -> bool:
        return tag.has_attribute(self.name)

    def __str__(self) -> str:
        return f"[{self.name}]"


@dataclass(frozen=True)
class AttributeEquals:
    """``[name=value]``"""

    name: str
    value: str

    def matches(self, tag: TagOpen) -> bool:
        return tag.get_attribute(self.name) == self.value

    def __str__(self) -> str:
        if self.name == "id":
            return f"#{self.value}"
        return f'[{self.name}="{self.value}"]'


@dataclass(frozen=True)
class AttributeContainsWord:
    """``[name~=word]``: whitespace-separated word match, used for classes."""

    name: str
    word: str

    def matches(self, tag: TagOpen) -> bool:
        value = tag.get_attribute(self.name)
        return value is not None and self.word in value.split()

    def __str__(self) -> str:
        if self.name == "class":
            return f".{self.word}"
        return f'[{self.name}~="{self.word}"]'


@dataclass(frozen=True)
class AttributePrefix:
    """``[name^=prefix]``; an empty prefix never matches."""

    name: str
    prefix: str

    def matches(self, tag: TagOpen) -> bool:
        value = tag.get_attribute(self.name)
        return bool(self.prefix) and value is not None and value.startswith(
            self.prefix
        )

    def __str__(self) -> str:
        return f'[{self.name}^="{self.prefix}"]'


@dataclass(frozen=True)
class AttributeSuffix:
    """``[name$=suffix]``; an empty suffix never matches."""

    name: str
    suffix: str

    def matches(self, tag: TagOpen) -> bool:
        value = tag.get_attribute(self.name)
        return bool(self.suffix) and value is not None and value.endswith(
            self.suffix
        )

    def __str__(self) -> str:
        return f'[{self.name}$="{self.suffix}"]'


@dataclass(frozen=True)
class AttributeSubstring:
    """``[name*=part]``; an empty part never matches."""

    name: str
    part: str

    def matches(self, tag: TagOpen) -> bool:
        value = tag.get_attribute(self.name)
        return bool(self.part) and value is not None and self.part in value

    def __str__(self) -> str:
        return f'[{self.name}*="{self.part}"]'


@dataclass(frozen=True)
class AttributeMatches:
    """The attribute value contains a match for a regular expression.

    No CSS spelling exists for this one; build it with
    ``SelectNode.attr_matches``.
    """

    name: str
    pattern: re.Pattern[str]

    def matches(self, tag: TagOpen) -> bool:
        value = tag.get_attribute(self.name)
        return value is not None and self.pattern.search(value) is not None

    def __str__(self) -> str:
        return f"[{self.name}=~/{self.pattern.pattern}/]"


AttributePredicate: TypeAlias = (
    HasAttribute
    | AttributeEquals
    | AttributeContainsWord
    | AttributePrefix
    | AttributeSuffix
    | AttributeSubstring
    | AttributeMatches
)


# =============================================================================
# Nodes and selectors
# =============================================================================


class Axis(Enum):
    """How a selector node relates to the node before it."""

    DESCENDANT = " "
    CHILD = " > "


@dataclass(frozen=True)
class SelectNode:
    """A test against a single opening element.

    Attributes:
        tag: Lower-case element name, or None to match any element.
        predicates: Attribute predicates that must all hold.
    """

    tag: str | None = None
    predicates: tuple[AttributePredicate, ...] = field(default=())

    def matches(self, token: TagOpen) -> bool:
        if self.tag is not None and token.name != self.tag:
            return False
        return all(predicate.matches(token) for predicate in self.predicates)

    def where(self, predicate: AttributePredicate) -> SelectNode:
        """Return a copy of this node with one more attribute predicate."""
        return SelectNode(self.tag, self.predicates + (predicate,))

    def with_attr(self, name: str, value: str | None = None) -> SelectNode:
        """Require an attribute, optionally with an exact value."""
        name = name.lower()
        if value is None:
            return self.where(HasAttribute(name))
        return self.where(AttributeEquals(name, value))

    def has_class(self, class_name: str) -> SelectNode:
        return self.where(AttributeContainsWord("class", class_name))

    def attr_matches(self, name: str, pattern: str | re.Pattern[str]) -> SelectNode:
        """Require an attribute whose value contains a regex match."""
        return self.where(AttributeMatches(name.lower(), re.compile(pattern)))

    def to_selector(self) -> Selector:
        return Selector((self,), ())

    def child(self, other: Selectable | str) -> Selector:
        return self.to_selector().child(other)

    def __floordiv__(self, other: Selectable | str) -> Selector:
        return self.to_selector() // other

    def __str__(self) -> str:
        rendered = "".join(str(predicate) for predicate in self.predicates)
        if self.tag is None:
            return rendered or "*"
        return f"{self.tag}{rendered}"


@dataclass(frozen=True)
class Selector:
    """A chain of SelectNodes joined by axes.

    ``axes[i]`` joins ``nodes[i]`` to ``nodes[i + 1]``, so there is always one
    axis fewer than there are nodes.

    Attributes:
        nodes: The nodes, outermost first.
        axes: The axes between consecutive nodes.
    """

    nodes: tuple[SelectNode, ...]
    axes: tuple[Axis, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.nodes:
            raise ValueError("A selector needs at least one node")
        if len(self.axes) != len(self.nodes) - 1:
            raise ValueError("A selector needs exactly one axis between nodes")

    def to_selector(self) -> Selector:
        return self

    def _join(self, axis: Axis, other: Selectable | str) -> Selector:
        tail = to_selector(other)
        return Selector(
            self.nodes + tail.nodes,
            self.axes + (axis,) + tail.axes,
        )

    def descendant(self, other: Selectable | str) -> Selector:
        """Match ``other`` anywhere inside a match of this selector."""
        return self._join(Axis.DESCENDANT, other)

    def child(self, other: Selectable | str) -> Selector:
        """Match ``other`` only as a direct child of a match of this selector."""
        return self._join(Axis.CHILD, other)

    def __floordiv__(self, other: Selectable | str) -> Selector:
        return self.descendant(other)

    def __str__(self) -> str:
        parts = [str(self.nodes[0])]
        for axis, node in zip(self.axes, self.nodes[1:]):
            parts.append(axis.value)
            parts.append(str(node))
        return "".join(parts)


@runtime_checkable
class Selectable(Protocol):
    """Anything that can be turned into a Selector."""

    def to_selector(self) -> Selector: ...


SelectorLike: TypeAlias = Selectable | str


def tag(name: str, class_: str | None = None, **attributes: str) -> SelectNode:
    """Build a node matching one element name.

    Args:
        name: Element name (case-insensitive).
        class_: Optional class the element must carry.
        **attributes: Attributes that must have exactly these values.

    Example::

        tag("a", class_="next", rel="next")
    """
    node = SelectNode(name.lower())
    if class_ is not None:
        node = node.has_class(class_)
    for key, value in attributes.items():
        node = node.with_attr(key, value)
    return node


def any_tag() -> SelectNode:
    """Build a node matching every element."""
    return SelectNode()


def to_selector(selectable: SelectorLike) -> Selector:
    """Convert anything selector-like into a Selector.

    Raises:
        SelectorSyntaxError: If a string is invalid or unsupported.
        TypeError: If the value is neither a string nor Selectable.
    """
    if isinstance(selectable, str):
        return parse_selector(selectable)
    if isinstance(selectable, Selectable):
        return selectable.to_selector()
    raise TypeError(
        f"Expected a selector string or Selectable, got {type(selectable).__name__}"
    )


# =============================================================================
# CSS parsing
# =============================================================================


@lru_cache(maxsize=512)
def parse_selector(css: str) -> Selector:
    """Parse a CSS-subset selector string.

    Args:
        css: Selector text, e.g. ``"table.cases > tr td"``.

    Returns:
        The equivalent Selector.

    Raises:
        SelectorSyntaxError: If cssselect rejects the string or it uses
            anything outside the supported subset.
    """
    try:
        parsed = cssselect.parse(css)
    except cssselect.SelectorError as e:
        raise SelectorSyntaxError(css, str(e)) from e

    if len(parsed) != 1:
        raise SelectorSyntaxError(css, "selector groups are not supported")
    if parsed[0].pseudo_element is not None:
        raise SelectorSyntaxError(css, "pseudo-elements are not supported")

    nodes, axes = _convert_combined(css, parsed[0].parsed_tree)
    return Selector(tuple(nodes), tuple(axes))


def _convert_combined(css: str, tree: object) -> tuple[list[SelectNode], list[Axis]]:
    if not isinstance(tree, CombinedSelector):
        return [_convert_compound(css, tree)], []

    nodes, axes = _convert_combined(css, tree.selector)
    if tree.combinator == " ":
        axes.append(Axis.DESCENDANT)
    elif tree.combinator == ">":
        axes.append(Axis.CHILD)
    else:
        raise SelectorSyntaxError(
            css, f"the {tree.combinator!r} combinator is not supported"
        )
    nodes.append(_convert_compound(css, tree.subselector))
    return nodes, axes


def _convert_compound(css: str, tree: object) -> SelectNode:
    predicates: list[AttributePredicate] = []

    while not isinstance(tree, Element):
        if isinstance(tree, Class):
            predicates.append(AttributeContainsWord("class", tree.class_name))
        elif isinstance(tree, Hash):
            predicates.append(AttributeEquals("id", tree.id))
        elif isinstance(tree, Attrib):
            predicates.append(_convert_attrib(css, tree))
        else:
            raise SelectorSyntaxError(
                css, f"{type(tree).__name__} selectors are not supported"
            )
        tree = tree.selector

    if tree.namespace is not None:
        raise SelectorSyntaxError(css, "namespaces are not supported")

    name = tree.element.lower() if tree.element and tree.element != "*" else None
    predicates.reverse()
    return SelectNode(name, tuple(predicates))


def _convert_attrib(css: str, attrib: Attrib) -> AttributePredicate:
    if attrib.namespace is not None:
        raise SelectorSyntaxError(css, "namespaces are not supported")

    name = attrib.attrib.lower()
    if attrib.operator == "exists":
        return HasAttribute(name)

    # cssselect hands the value over as a Token
    value = getattr(attrib.value, "value", attrib.value)

    match attrib.operator:
        case "=":
            return AttributeEquals(name, value)
        case "~=":
            return AttributeContainsWord(name, value)
        case "^=":
            return AttributePrefix(name, value)
        case "$=":
            return AttributeSuffix(name, value)
        case "*=":
            return AttributeSubstring(name, value)
        case _:
            raise SelectorSyntaxError(
                css, f"the {attrib.operator!r} attribute operator is not supported"
            )
