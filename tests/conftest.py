"""Shared fixtures for chisel tests."""

import pytest

from chisel.common.position_index import tag_with_offset
from chisel.common.tokenizer import parse_tags
from chisel.data_types import IndexedToken


@pytest.fixture
def greeting_html() -> str:
    """Two paragraphs in a div, only the second carrying an id.

    Returns:
        Markup string.
    """
    return '<div><p>Hello</p><p id="x">World</p></div>'


@pytest.fixture
def greeting_tokens(greeting_html: str) -> list[IndexedToken]:
    """The greeting markup, tokenized and indexed."""
    return tag_with_offset(parse_tags(greeting_html))


@pytest.fixture
def nested_html() -> str:
    """Nested divs with paragraphs at two depths.

    Returns:
        Markup string.
    """
    return (
        '<div id="outer">'
        '<div id="inner" class="box wide"><p>a</p></div>'
        '<p class="note">b</p>'
        "</div>"
    )


@pytest.fixture
def nested_tokens(nested_html: str) -> list[IndexedToken]:
    """The nested markup, tokenized and indexed."""
    return tag_with_offset(parse_tags(nested_html))


@pytest.fixture
def cases_html() -> str:
    """A small listing page of court cases.

    Returns:
        Markup string.
    """
    return """
    <html>
    <body>
        <h1>Bug Civil Court</h1>
        <table class="cases">
            <tr class="case"><td class="name">Ant v. Bee</td>
                <td><a href="/dockets/1">BCC-1</a></td></tr>
            <tr class="case"><td class="name">Cricket v. Dragonfly</td>
                <td><a href="/dockets/2">BCC-2</a></td></tr>
            <tr class="case"><td class="name">Earwig v. Flea</td>
                <td><a>sealed</a></td></tr>
        </table>
    </body>
    </html>
    """
