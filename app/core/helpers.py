"""
Helper functions for common infrastructure operations.

These utilities have no knowledge of domain concepts like rooms or messages.

Usage:
    from core.helpers import generate_token, parse_int

    token = generate_token(32)
    user_id = parse_int(request.query_params.get("user_id"))
"""

from __future__ import annotations

import secrets


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of bytes (resulting string is 2x length in hex)

    Returns:
        Hexadecimal token string
    """
    return secrets.token_hex(length)


def parse_int(value) -> int | None:
    """
    Parse a positive integer identifier from user input.

    Returns None for missing, non-numeric or non-positive values so
    views can answer with a 400 instead of a 500.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def cap_count(count: int, cap: int) -> str:
    """
    Format a badge count, collapsing anything above cap to "{cap}+".

    Example:
        cap_count(3, 9)   # "3"
        cap_count(12, 9)  # "9+"
    """
    return f"{cap}+" if count > cap else str(count)
