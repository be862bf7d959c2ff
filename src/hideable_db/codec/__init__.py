# Codec Module - binary-safe escaping for SQL string literals
#
# encode/decode: byte sequence <-> byte sequence with no NUL and no quote
# escape_for_literal/unescape_from_literal: sentinel dispatch at the SQL boundary

from .binary import (
    ESCAPE,
    QUOTE,
    SENTINEL,
    MalformedEncoding,
    choose_offset,
    decode,
    decode_binary,
    encode,
    encode_binary,
    escape_count,
)
from .literal import (
    double_quotes,
    escape_for_literal,
    needs_encoding,
    quote_literal,
    unescape_from_literal,
)

__all__ = [
    "ESCAPE",
    "QUOTE",
    "SENTINEL",
    "MalformedEncoding",
    "choose_offset",
    "decode",
    "decode_binary",
    "encode",
    "encode_binary",
    "escape_count",
    "double_quotes",
    "escape_for_literal",
    "needs_encoding",
    "quote_literal",
    "unescape_from_literal",
]
