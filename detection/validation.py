"""
Recognized text validation.

Functions for deciding whether text read from a chain raster is a number.
"""

import re

_DIGITS = re.compile(r"\d+", re.ASCII)


def is_number(text: str) -> bool:
    """Check if text is a non-empty run of decimal digits.

    Args:
        text: Text to check (not stripped).

    Returns:
        True if every character is a digit 0-9.
    """
    return _DIGITS.fullmatch(text) is not None


def text_rejection_reason(text: str, expected_length: int) -> str | None:
    """Return why recognized text is not acceptable for a chain, or None.

    The text is stripped first. It must be non-empty, have exactly one
    character per chain member, and consist of digits only.

    Args:
        text: Raw recognizer output.
        expected_length: Number of components in the chain.
    """
    cleaned = text.strip()
    if not cleaned:
        return "no text recognized"

    if len(cleaned) != expected_length:
        return f"text size mismatch: expected {expected_length} digits, got {cleaned!r}"

    if not is_number(cleaned):
        return f"text is not a number ({cleaned!r})"

    return None
