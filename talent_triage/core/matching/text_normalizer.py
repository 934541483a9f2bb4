"""
Text normalization for resume/job matching.

Turns free text into lower-case tokens made of the characters that can
appear in a skill name (letters, digits and ``+ . # / -``).
"""

import re
from typing import Optional

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9+.#/\-\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> list[str]:
    """
    Tokenize and canonicalize free text.

    Args:
        text: Raw resume or job description text (None is treated as empty)

    Returns:
        Tokens in their original order, without empty strings
    """
    if not text:
        return []
    cleaned = _DISALLOWED_CHARS.sub(" ", text.lower())
    return [token for token in _WHITESPACE.split(cleaned) if token]
