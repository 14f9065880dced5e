"""Common utility functions."""

from typing import Optional


def present(value: Optional[str]) -> bool:
    """True when an optional text field should be rendered.

    None, blank strings and the literal "null" (any case) all count as absent.
    """
    if value is None:
        return False
    stripped = str(value).strip()
    return bool(stripped) and stripped.lower() != "null"
