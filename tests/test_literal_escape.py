"""Tests for the SQL literal boundary (sentinel dispatch + quote doubling)."""

import random

import pytest

from hideable_db.codec import (
    SENTINEL,
    double_quotes,
    encode,
    escape_for_literal,
    needs_encoding,
    quote_literal,
    unescape_from_literal,
)


def engine_unquote(literal_body: bytes) -> bytes:
    """What SQLite hands back for a value written as '<literal_body>'."""
    return literal_body.replace(b"''", b"'")


class TestEscapeForLiteral:

    def test_plain_text_unchanged(self):
        assert escape_for_literal(b"hello") == b"hello"

    def test_plain_text_quotes_doubled(self):
        assert escape_for_literal(b"it's") == b"it''s"

    def test_empty(self):
        assert escape_for_literal(b"") == b""

    def test_nul_triggers_encoding(self):
        escaped = escape_for_literal(b"a\x00b")
        assert escaped[0] == SENTINEL
        assert escaped == encode(b"a\x00b")
        assert b"\x00" not in escaped

    def test_leading_sentinel_triggers_encoding(self):
        escaped = escape_for_literal(b"\x01abc")
        assert escaped == encode(b"\x01abc")
        assert unescape_from_literal(escaped) == b"\x01abc"

    def test_sentinel_elsewhere_is_plain(self):
        assert escape_for_literal(b"a\x01b") == b"a\x01b"

    def test_encoded_output_has_no_quotes_to_double(self):
        data = b"'\x00'" * 10
        assert escape_for_literal(data) == encode(data)

    def test_quote_literal_wraps(self):
        assert quote_literal(b"it's") == b"'it''s'"
        assert quote_literal(b"") == b"''"


class TestUnescapeFromLiteral:

    def test_plain_text_passes_through(self):
        assert unescape_from_literal(b"hello") == b"hello"
        assert unescape_from_literal(b"") == b""

    def test_sentinel_value_is_decoded(self):
        assert unescape_from_literal(encode(b"\x00\x00")) == b"\x00\x00"


class TestPassThrough:

    @pytest.mark.parametrize(
        "data",
        [b"", b"hello", b"it's", b"''", b"\x00", b"\x01", b"\x01'\x00", bytes(range(256))],
    )
    def test_through_engine(self, data):
        assert unescape_from_literal(engine_unquote(escape_for_literal(data))) == data

    def test_random_values_through_engine(self):
        rng = random.Random(7)
        for _ in range(200):
            data = rng.randbytes(rng.randint(0, 64))
            assert unescape_from_literal(engine_unquote(escape_for_literal(data))) == data

    @pytest.mark.parametrize("data", [b"hello", b"\x00'\x01", b"\x01x", bytes(range(256))])
    def test_quote_free_or_encoded_values_are_identity(self, data):
        assert unescape_from_literal(escape_for_literal(data)) == data


class TestHelpers:

    def test_needs_encoding(self):
        assert needs_encoding(b"\x01")
        assert needs_encoding(b"ab\x00")
        assert not needs_encoding(b"ab\x01")
        assert not needs_encoding(b"")

    def test_double_quotes(self):
        assert double_quotes(b"'a''") == b"''a''''"
