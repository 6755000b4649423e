"""Markup tokenization and canonicalization.

This module turns raw markup into the flat token list the scraper engine
works over. Parsing is delegated to lxml.html, whose recovering parser already
auto-closes unbalanced elements; the resulting tree is then walked once to
emit open, text, children, close and tail in document order.

Callers that build token lists by hand go through canonicalize_tags instead,
which applies the same recovery rules at the token level.

Usage::

    from chisel.common.tokenizer import parse_tags

    tags = parse_tags("<div><p>Hello<p>World</div>")
    # [TagOpen('div'), TagOpen('p'), TagText('Hello'), TagClose('p'), ...]
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Iterable

from lxml import etree
from lxml import html as lxml_html
from lxml.html.defs import empty_tags

from chisel.common.config import DEFAULT_PARSE_OPTIONS, ParseOptions
from chisel.common.exceptions import MarkupParseError
from chisel.data_types import (
    TagClose,
    TagComment,
    TagOpen,
    TagOther,
    TagText,
    Token,
)

logger = logging.getLogger(__name__)

# Markup that carries its own document shell is parsed as a whole document,
# anything else as a list of body fragments.
_FULL_DOCUMENT = re.compile(
    r"^\s*(<\?[^>]*>\s*)?(<!--.*?-->\s*)*<(!doctype|html)", re.I | re.S
)
# A bare <head> or <body> is parsed as a document as well, without the html
# element lxml wraps around it.
_DOCUMENT_SECTION = re.compile(
    r"^\s*(<!--.*?-->\s*)*<(head|body)[\s/>]", re.I | re.S
)

_BYTE_ORDER_MARKS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)
_DECLARED_CHARSET = re.compile(
    rb"""<(?:\?xml[^>]*encoding|meta[^>]*charset)\s*=\s*["']?([\w.:-]+)""",
    re.I,
)


def parse_tags(
    markup: str | bytes,
    options: ParseOptions | None = None,
) -> list[Token]:
    """Tokenize raw markup into a canonical token list.

    The output is well formed: every TagOpen has a matching TagClose, void
    elements included, and element and attribute names are lower-case.

    Args:
        markup: Markup text. ``bytes`` are decoded with ``options.encoding``
            when given. Otherwise the encoding comes from a byte order mark,
            an XML declaration or a ``<meta charset>``, and defaults to UTF-8.
        options: Tokenizer options (default: ParseOptions()).

    Returns:
        List of tokens in document order.

    Raises:
        MarkupParseError: If the bytes cannot be decoded or lxml rejects the
            input.
    """
    options = options or DEFAULT_PARSE_OPTIONS

    tags: list[Token] = []
    try:
        text = _decode(markup, options.encoding)
        if not text.strip():
            return []

        # lxml only sees UTF-8 bytes, so a declared charset never overrides
        # the decoding done here.
        parser = lxml_html.HTMLParser(encoding="utf-8")
        if _FULL_DOCUMENT.match(text[:1024]):
            root = lxml_html.document_fromstring(text.encode("utf-8"), parser=parser)
            _emit_document(root, tags, options, implied_root=False)
        elif _DOCUMENT_SECTION.match(text[:1024]):
            root = lxml_html.document_fromstring(text.encode("utf-8"), parser=parser)
            _emit_document(root, tags, options, implied_root=True)
        else:
            body = text.lstrip()
            if body.startswith("<"):
                _emit_text(text[: len(text) - len(body)], tags, options)
            else:
                body = text
            for fragment in lxml_html.fragments_fromstring(
                body.encode("utf-8"), parser=parser
            ):
                if isinstance(fragment, str):
                    _emit_text(fragment, tags, options)
                else:
                    _emit_node(fragment, tags, options)
    except (
        etree.ParserError,
        etree.XMLSyntaxError,
        LookupError,
        ValueError,
    ) as e:
        raise MarkupParseError(str(e)) from e

    logger.debug("Tokenized %d characters into %d tags", len(text), len(tags))
    return tags


def _decode(markup: str | bytes, encoding: str | None) -> str:
    if isinstance(markup, str):
        return markup
    if encoding is not None:
        return markup.decode(encoding)
    return markup.decode(_sniff_encoding(markup), errors="replace")


def _sniff_encoding(markup: bytes) -> str:
    for mark, encoding in _BYTE_ORDER_MARKS:
        if markup.startswith(mark):
            return encoding

    declared = _DECLARED_CHARSET.search(markup[:1024])
    if declared:
        name = declared.group(1).decode("ascii")
        try:
            return codecs.lookup(name).name
        except LookupError:
            logger.debug("Ignoring unknown declared charset '%s'", name)
    return "utf-8"


def _emit_document(
    root: etree._Element,
    tags: list[Token],
    options: ParseOptions,
    implied_root: bool,
) -> None:
    preceding = list(reversed(list(root.itersiblings(preceding=True))))
    while preceding and _processing_instruction(preceding[0]) is not None:
        _emit_node(preceding.pop(0), tags, options)

    doctype = root.getroottree().docinfo.doctype
    if doctype:
        tags.append(TagOther(doctype))

    for sibling in preceding:
        _emit_node(sibling, tags, options)
    if implied_root:
        _emit_text(root.text, tags, options)
        for child in root:
            _emit_node(child, tags, options)
        _emit_text(root.tail, tags, options)
    else:
        _emit_node(root, tags, options)
    for sibling in root.itersiblings():
        _emit_node(sibling, tags, options)


def _emit_text(text: str | None, tags: list[Token], options: ParseOptions) -> None:
    if not text:
        return
    if not options.keep_whitespace_text and not text.strip():
        return
    tags.append(TagText(text))


def _processing_instruction(node: etree._Element) -> str | None:
    """Markup of a processing instruction node, or None for other nodes.

    Recent libxml2 releases read ``<?...>`` in HTML as a comment whose text is
    ``?...?``; older ones build a real processing instruction.
    """
    if node.tag is etree.ProcessingInstruction:
        return etree.tostring(node, encoding="unicode", with_tail=False)
    if node.tag is etree.Comment and (node.text or "").startswith("?"):
        return f"<{node.text}>"
    return None


def _emit_node(
    node: etree._Element, tags: list[Token], options: ParseOptions
) -> None:
    """Emit one tree node, its descendants and its tail."""
    instruction = _processing_instruction(node)
    if instruction is not None:
        tags.append(TagOther(instruction))
    elif node.tag is etree.Comment:
        if options.keep_comments:
            tags.append(TagComment(node.text or ""))
    elif node.tag is etree.Entity:
        tags.append(
            TagOther(etree.tostring(node, encoding="unicode", with_tail=False))
        )
    else:
        name = _local_name(node.tag)
        attributes = tuple(
            (_local_name(key), value) for key, value in node.attrib.items()
        )
        tags.append(TagOpen(name, attributes))
        _emit_text(node.text, tags, options)
        for child in node:
            _emit_node(child, tags, options)
        tags.append(TagClose(name))

    _emit_text(node.tail, tags, options)


def _local_name(name: str) -> str:
    if name.startswith("{"):
        name = name.rpartition("}")[2]
    return name.lower()


def canonicalize_tags(tags: Iterable[Token]) -> list[Token]:
    """Repair a hand-built token sequence so that it is well formed.

    Rules, applied left to right:

    - element and attribute names are lower-cased;
    - a void element (``br``, ``img``, ...) is closed immediately and any
      explicit close for it is dropped;
    - a close with no open element of that name is dropped;
    - a close for an element that is open but not innermost first closes every
      element opened after it;
    - elements still open at the end are closed in reverse order.

    Applying it to already canonical output returns an equal list.

    Args:
        tags: Tokens in document order.

    Returns:
        A new, well-formed token list.
    """
    canonical: list[Token] = []
    open_names: list[str] = []

    for tag in tags:
        match tag:
            case TagOpen(name=name, attributes=attributes):
                name = name.lower()
                canonical.append(
                    TagOpen(
                        name,
                        tuple((key.lower(), value) for key, value in attributes),
                    )
                )
                if name in empty_tags:
                    canonical.append(TagClose(name))
                else:
                    open_names.append(name)
            case TagClose(name=name):
                name = name.lower()
                if name not in open_names:
                    continue
                while open_names:
                    innermost = open_names.pop()
                    canonical.append(TagClose(innermost))
                    if innermost == name:
                        break
            case _:
                canonical.append(tag)

    while open_names:
        canonical.append(TagClose(open_names.pop()))

    return canonical
