"""Tests for the chisel exception hierarchy."""

from chisel.common.exceptions import (
    ChiselError,
    MarkupParseError,
    ScrapeFailedError,
    SelectorSyntaxError,
)


class TestChiselError:
    """Tests for ChiselError base class."""

    def test_exception_has_required_attributes(self):
        """ChiselError shall have message and context attributes."""
        exc = ChiselError(message="Test error", context={"key": "value"})

        assert exc.message == "Test error"
        assert exc.context == {"key": "value"}

    def test_exception_context_defaults_to_empty_dict(self):
        """ChiselError shall default context to empty dict."""
        exc = ChiselError(message="Test error")

        assert exc.context == {}
        assert str(exc) == "Test error"

    def test_exception_formats_message_with_context(self):
        """ChiselError shall include context in formatted message."""
        exc = ChiselError(
            message="Test error",
            context={"selector": "div p", "count": 0},
        )

        formatted = str(exc)
        assert "Test error" in formatted
        assert "Context:" in formatted
        assert "selector: div p" in formatted
        assert "count: 0" in formatted


class TestSubclasses:
    """Tests for the specific error types."""

    def test_selector_syntax_error(self):
        """SelectorSyntaxError shall carry the selector and reason."""
        exc = SelectorSyntaxError("a + b", "the '+' combinator is not supported")

        assert isinstance(exc, ChiselError)
        assert isinstance(exc, ValueError)
        assert exc.selector == "a + b"
        assert "not supported" in str(exc)
        assert exc.context == {"selector": "a + b"}

    def test_scrape_failed_error(self):
        """ScrapeFailedError shall carry description, scraper name and token count."""
        exc = ScrapeFailedError("case list", "chroots('tr', text('td'))", 42)

        assert isinstance(exc, ChiselError)
        assert "case list" in str(exc)
        assert exc.context == {
            "scraper": "chroots('tr', text('td'))",
            "token_count": 42,
        }

    def test_markup_parse_error(self):
        """MarkupParseError shall carry the reason."""
        exc = MarkupParseError("Document is empty")

        assert exc.reason == "Document is empty"
        assert "Document is empty" in str(exc)
