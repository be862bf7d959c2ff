# Binary-safe escaping codec
#
# SQLite's string literals cannot carry NUL bytes, and apostrophes must be
# doubled. This codec maps any byte sequence onto one that contains neither,
# so binary values can be stored in ordinary TEXT columns.
#
# Layout of an encoded value:
#
#   0x01  e  body...
#
#   0x01  sentinel marking the value as codec output
#   e     offset key (1..255, never the quote byte)
#   body  each input byte b becomes s = (b - e) mod 256; if s is NUL, the
#         escape marker or the quote, it is written as ESCAPE, s + 1
#
# The offset key is chosen from the byte histogram so that as few input
# bytes as possible need the two-byte escape.

SENTINEL = 0x01
ESCAPE = 0x01
QUOTE = 0x27  # '
NUL = 0x00

# Shifted values that may not appear as literal body bytes.
_RESERVED = (NUL, ESCAPE, QUOTE)

# Second byte of a valid escape pair, i.e. (reserved + 1) mod 256.
_ESCAPED = frozenset((r + 1) & 0xFF for r in _RESERVED)


class MalformedEncoding(ValueError):
    """Raised when decode() is given bytes that encode() cannot produce.

    Attributes:
        offset: Index into the input where decoding failed.
    """

    def __init__(self, message: str, offset: int = 0):
        super().__init__(f"{message} (at byte {offset})")
        self.offset = offset


def choose_offset(data: bytes) -> int:
    """Pick the offset key that minimises the number of escaped bytes.

    A byte b needs escaping when (b - e) mod 256 lands on NUL, the escape
    marker or the quote, i.e. when b is e, e + 1 or e + QUOTE. The key 0
    is never chosen, and neither is QUOTE since the key is written
    unescaped. Ties go to the smallest key; the scan stops at the first
    key that needs no escapes at all.
    """
    counts = [0] * 256
    for b in data:
        counts[b] += 1

    best_key = 0
    best_cost = -1
    for e in range(1, 256):
        if e == QUOTE:
            continue
        cost = counts[e] + counts[(e + ESCAPE) & 0xFF] + counts[(e + QUOTE) & 0xFF]
        if best_cost < 0 or cost < best_cost:
            best_key = e
            best_cost = cost
            if cost == 0:
                break
    return best_key


def encode(data: bytes) -> bytes:
    """Encode arbitrary bytes so they contain no NUL and no quote byte.

    Empty input encodes to empty output (no sentinel). Every other result
    starts with SENTINEL followed by the offset key.
    """
    if not data:
        return b""

    e = choose_offset(data)
    out = bytearray((SENTINEL, e))
    for b in data:
        s = (b - e) & 0xFF
        if s in _RESERVED:
            out.append(ESCAPE)
            out.append((s + 1) & 0xFF)
        else:
            out.append(s)
    return bytes(out)


def decode(data: bytes) -> bytes:
    """Invert encode().

    Raises:
        MalformedEncoding: if the input is not something encode() emits,
            e.g. a missing header or an escape marker as the last byte.
    """
    if not data:
        return b""
    if len(data) < 2:
        raise MalformedEncoding("truncated header", len(data))
    if data[0] != SENTINEL:
        raise MalformedEncoding("missing sentinel", 0)

    e = data[1]
    if e == NUL or e == QUOTE:
        raise MalformedEncoding(f"invalid offset key 0x{e:02x}", 1)

    out = bytearray()
    i = 2
    n = len(data)
    while i < n:
        b = data[i]
        if b == ESCAPE:
            if i + 1 >= n:
                raise MalformedEncoding("dangling escape marker", i)
            nxt = data[i + 1]
            if nxt not in _ESCAPED:
                raise MalformedEncoding(f"invalid escape pair 0x01 0x{nxt:02x}", i)
            s = (nxt - 1) & 0xFF
            i += 2
        elif b == NUL or b == QUOTE:
            raise MalformedEncoding(f"unescaped reserved byte 0x{b:02x}", i)
        else:
            s = b
            i += 1
        out.append((s + e) & 0xFF)
    return bytes(out)


def escape_count(data: bytes) -> int:
    """Number of input bytes encode() will write as two-byte escapes."""
    if not data:
        return 0
    e = choose_offset(data)
    return sum(1 for b in data if ((b - e) & 0xFF) in _RESERVED)


# Package-level names
encode_binary = encode
decode_binary = decode
