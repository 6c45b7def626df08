"""
Utilities for rendering subwords as displayable strings.
"""

import unicodedata


def render_subword(s: str) -> str:
    """Replace Unicode control characters with escapes so a subword can be shown in errors."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)
