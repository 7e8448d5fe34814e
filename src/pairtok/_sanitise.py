"""
Utilities for converting token text to and from displayable strings.
"""

import unicodedata
from typing import Final

# GPT-2 style leading-space marker folded into token text
WORD_BOUNDARY_MARKER: Final[str] = "Ġ"


def render_text(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def unmark(s: str) -> str:
    """Turn word-boundary markers back into literal spaces."""
    return s.replace(WORD_BOUNDARY_MARKER, " ")
