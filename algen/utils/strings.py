"""
Text helpers shared by the generator and the emission rules.
"""

import re
import textwrap

_NUMBER_RE = re.compile(r"^\s*-?\d+(\.\d+)?\s*$")

# A newline that is not the very last character of the text.
_INNER_NEWLINE_RE = re.compile(r"(?!\n\Z)\n")


def is_number(text: str) -> bool:
    """Check whether generated text is a plain numeric literal.

    Args:
        text: Generated code fragment

    Returns:
        bool: True for text such as "5", "-3" or " 2.5 "
    """
    return bool(_NUMBER_RE.match(str(text)))


def prefix_lines(text: str, prefix: str) -> str:
    """Prepend a prefix to every line of text.

    A trailing newline does not start a new (prefixed) line.

    Args:
        text: Text to prefix
        prefix: Prefix for each line, e.g. an indent or "// "

    Returns:
        str: The prefixed text
    """
    return prefix + _INNER_NEWLINE_RE.sub("\n" + prefix, text)


def wrap(text: str, limit: int) -> str:
    """Wrap each paragraph of text to at most limit characters per line.

    Args:
        text: Free-form text, paragraphs separated by newlines
        limit: Maximum line width

    Returns:
        str: The wrapped text
    """
    limit = max(limit, 1)
    paragraphs = text.split("\n")
    wrapped = []
    for paragraph in paragraphs:
        if not paragraph.strip():
            wrapped.append("")
            continue
        wrapped.append(textwrap.fill(paragraph, width=limit,
                                     break_long_words=False,
                                     break_on_hyphens=False))
    return "\n".join(wrapped)
