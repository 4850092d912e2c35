"""Markup stripping and whitespace normalization for extracted text."""

import html
import re

_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(raw: str | None) -> str:
    """Strip markup from text and collapse whitespace.

    CDATA markers are removed, each tag is replaced by a space, HTML/XML
    entities (&amp; &lt; &gt; &quot; &#39; &nbsp; ...) are decoded, and runs
    of whitespace collapse to a single space.

    Args:
        raw: Markup or plain text, may be None

    Returns:
        Plain, trimmed text (empty string for empty input)
    """
    if not raw:
        return ""
    text = _CDATA_RE.sub("", raw)
    text = _TAG_RE.sub(" ", text)
    # Entities are decoded after tag removal so that an escaped "&lt;b&gt;"
    # survives as literal text.
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()
