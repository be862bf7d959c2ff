# SQL literal escaping
#
# Boundary between the binary codec and SQL text. Ordinary text is only
# quote-doubled so stored data stays readable; values that contain NUL
# or that start with the sentinel byte go through the binary codec.
#
# A stored value starting with 0x01 is always codec output. That rule is
# part of the on-disk format and must not change.

from .binary import QUOTE, SENTINEL, decode, encode

_QUOTE = bytes((QUOTE,))
_QUOTE_DOUBLED = _QUOTE * 2


def double_quotes(data: bytes) -> bytes:
    """Double every apostrophe, as SQLite expects inside '...' literals."""
    return data.replace(_QUOTE, _QUOTE_DOUBLED)


def needs_encoding(data: bytes) -> bool:
    """True if the value cannot be stored as plain quote-escaped text."""
    return data[:1] == bytes((SENTINEL,)) or b"\x00" in data


def escape_for_literal(data: bytes) -> bytes:
    """Escape a value for interpolation inside a single-quoted literal."""
    if not data:
        return b""
    if needs_encoding(data):
        return double_quotes(encode(data))
    return double_quotes(data)


def unescape_from_literal(data: bytes) -> bytes:
    """Restore a value read back from the database.

    The engine has already undone the quote doubling; only codec output
    (recognised by the sentinel) needs further work.
    """
    if data[:1] == bytes((SENTINEL,)):
        return decode(data)
    return data


def quote_literal(data: bytes) -> bytes:
    """Return a complete SQL string literal for the value."""
    return _QUOTE + escape_for_literal(data) + _QUOTE
