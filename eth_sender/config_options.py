"""
=============================================================================
Environment Parsing Helpers (config_options.py)
=============================================================================

Small explicit helpers that turn a named environment variable into a typed
value.  Every failure (unset, empty, or not convertible) raises
``Misconfiguration``; nothing here substitutes a default for a required
setting.

Numbers are matched against plain ASCII patterns before conversion, so
inputs Python's ``int()``/``float()`` would tolerate (digit-group
underscores, non-ASCII digits, surrounding whitespace) are malformed here.

Only the standard library is used so the parameters layer can be imported
without the web stack.
"""

from __future__ import annotations

import os
import re
from datetime import timedelta
from typing import Any, Callable, Optional

_TRUE_VALUES = ("1", "true", "yes")
_FALSE_VALUES = ("0", "false", "no")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class Misconfiguration(RuntimeError):
    """A required setting is missing or malformed."""

    code = "misconfiguration"

    def __init__(self, name: str, reason: str, value: Optional[str] = None):
        self.name = name
        self.reason = reason
        self.value = value
        if value is None:
            message = f"{name}: {reason}"
        else:
            message = f"{name}: {reason} (got {value!r})"
        super().__init__(message)


# =============================================================================
# Parsers
# =============================================================================


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"expected one of {_TRUE_VALUES + _FALSE_VALUES}")


def _parse_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ValueError("not a decimal integer")
    return int(raw)


def _parse_float(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError("not a decimal number")
    return float(raw)


def positive_int(raw: str) -> int:
    """Parser for settings that must be a strictly positive integer."""
    value = _parse_int(raw)
    if value <= 0:
        raise ValueError("expected a positive integer")
    return value


_PARSERS: dict[Any, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: _parse_int,
    float: _parse_float,
}


def _convert(name: str, raw: str, type_: Callable[[str], Any]) -> Any:
    parser = _PARSERS.get(type_, type_)
    try:
        return parser(raw)
    except (TypeError, ValueError) as exc:
        type_name = getattr(type_, "__name__", repr(type_))
        raise Misconfiguration(name, f"cannot parse as {type_name}", raw) from exc


# =============================================================================
# Public helpers
# =============================================================================


def parse_env(name: str, type_: Callable[[str], Any] = str) -> Any:
    """
    Read environment variable ``name`` and convert it with ``type_``.

    ``type_`` may be ``str``, ``int``, ``float``, ``bool`` or any callable
    taking the raw string.  Raises ``Misconfiguration`` if the variable is
    unset, empty, or cannot be converted.
    """
    raw = os.environ.get(name)
    if raw is None:
        raise Misconfiguration(name, "environment variable is not set")
    if not raw.strip():
        raise Misconfiguration(name, "environment variable is empty", raw)
    return _convert(name, raw, type_)


def parse_env_if_exists(name: str, type_: Callable[[str], Any] = str) -> Optional[Any]:
    """Like ``parse_env`` but returns None for an unset or empty variable."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return _convert(name, raw, type_)


def parse_env_seconds(name: str) -> timedelta:
    """Read a non-negative whole number of seconds as a ``timedelta``."""
    seconds = parse_env(name, int)
    if seconds < 0:
        raise Misconfiguration(name, "expected a non-negative number of seconds", str(seconds))
    return timedelta(seconds=seconds)
