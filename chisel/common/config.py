"""Tokenizer options.

Example::

    from chisel.common.config import ParseOptions

    options = ParseOptions(keep_comments=False)
    tags = parse_tags(markup, options)
"""

from pydantic import BaseModel, ConfigDict


class ParseOptions(BaseModel):
    """Options controlling how raw markup is turned into tokens.

    Attributes:
        keep_comments: Emit TagComment tokens for markup comments.
        keep_whitespace_text: Emit TagText tokens that contain only
            whitespace. When False they are dropped.
        encoding: Encoding used to decode ``bytes`` markup. None reads it
            from a byte order mark, an XML declaration or a
            ``<meta charset>``, falling back to UTF-8.
    """

    model_config = ConfigDict(frozen=True)

    keep_comments: bool = True
    keep_whitespace_text: bool = True
    encoding: str | None = None


DEFAULT_PARSE_OPTIONS = ParseOptions()
