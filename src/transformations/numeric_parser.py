"""
Parsing of Gapminder income cells.

The income table mixes plain numbers ("980", "1450.5") with thousands
written in "k" notation ("12.3k"). A "k" token is decoded by dropping
every non-digit character and multiplying the remaining integer by 100,
so "12.3k" -> "123" -> 12300. That rule is only exact when the token has
one fractional digit ("12k" -> 1200, "12.34k" -> 123400); such tokens are
still decoded with the same arithmetic and can be spotted with
`is_irregular_k_token` for data-quality reporting.
"""

from __future__ import annotations

import math
import re
from numbers import Real

from common.errors import ParseError

K_SUFFIX = "k"
K_MULTIPLIER = 100

_NON_DIGITS = re.compile(r"[^0-9]")
_REGULAR_K_TOKEN = re.compile(r"^\d+\.\dk$")


def _finite(token: object, value: float) -> float:
    if not math.isfinite(value):
        raise ParseError(token, reason="non-finite value")
    return value


def parse_income_token(token: object) -> float:
    """
    Convert one income cell to a float.

    Already-numeric cells are returned as floats. Strings ending in
    "k" (case-sensitive) use the strip-digits-times-100 rule; anything
    else must parse as a plain number.

    Raises ParseError when no finite number can be recovered.
    """
    if isinstance(token, Real) and not isinstance(token, bool):
        return _finite(token, float(token))
    if not isinstance(token, str):
        raise ParseError(token, reason=f"unsupported type {type(token).__name__}")

    if token.endswith(K_SUFFIX):
        digits = _NON_DIGITS.sub("", token)
        if not digits:
            raise ParseError(token, reason="no digits before 'k' suffix")
        return float(int(digits) * K_MULTIPLIER)

    try:
        value = float(token)
    except ValueError as exc:
        raise ParseError(token) from exc
    return _finite(token, value)


def is_irregular_k_token(token: object) -> bool:
    """True for "k" tokens the x100 rule does not decode faithfully."""
    if not isinstance(token, str) or not token.endswith(K_SUFFIX):
        return False
    return _REGULAR_K_TOKEN.match(token) is None


def parse_plain_number(token: object) -> float:
    """Strict numeric conversion for cells that never use "k" notation."""
    if isinstance(token, Real) and not isinstance(token, bool):
        return _finite(token, float(token))
    try:
        value = float(str(token))
    except ValueError as exc:
        raise ParseError(token) from exc
    return _finite(token, value)


__all__ = [
    "K_SUFFIX",
    "K_MULTIPLIER",
    "parse_income_token",
    "parse_plain_number",
    "is_irregular_k_token",
]
