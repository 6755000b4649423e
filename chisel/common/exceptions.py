"""Exception types for chisel.

Scraper evaluation itself never raises for a structural mismatch: a selector
that matches nothing, a head token of the wrong kind and a missing attribute
all make the scraper fail, and failure is reported as absence. The exceptions
here cover what happens around evaluation:

1. SelectorSyntaxError when a selector string cannot be converted
2. MarkupParseError when the tokenizer cannot make sense of the input
3. ScrapeFailedError when a caller asks for a result to be required
"""

from typing import Any


class ChiselError(Exception):
    """Base class for chisel errors.

    Carries a human-readable message and a dict of context (selector, counts,
    scraper name, ...) that is rendered into ``str(exc)``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the error.
            context: Optional dict of additional context.
        """
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class SelectorSyntaxError(ChiselError, ValueError):
    """Raised when a selector string is invalid or outside the supported subset.

    Attributes:
        selector: The selector string that was rejected.
        reason: Why it was rejected.
    """

    def __init__(self, selector: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            selector: The selector string that was rejected.
            reason: Why it was rejected.
        """
        self.selector = selector
        self.reason = reason
        super().__init__(
            f"Invalid selector {selector!r}: {reason}",
            {"selector": selector},
        )


class MarkupParseError(ChiselError):
    """Raised when the markup could not be tokenized at all."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Could not parse markup: {reason}")


class ScrapeFailedError(ChiselError):
    """Raised by scrape_or_raise when a scraper produced no result.

    Attributes:
        description: Caller-supplied description of what was being scraped.
        scraper_name: Name of the scraper that failed.
        token_count: Number of tokens the scraper was run against.
    """

    def __init__(
        self,
        description: str,
        scraper_name: str,
        token_count: int,
    ) -> None:
        """Initialize the exception.

        Args:
            description: Caller-supplied description of what was being scraped.
            scraper_name: Name of the scraper that failed.
            token_count: Number of tokens the scraper was run against.
        """
        self.description = description
        self.scraper_name = scraper_name
        self.token_count = token_count

        super().__init__(
            f"Scraper found no result for '{description}'",
            {
                "scraper": scraper_name,
                "token_count": token_count,
            },
        )
