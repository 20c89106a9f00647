"""
Core Tests - Primitive Byte Encoding

Verifies exact bytes for:
  - bool (one byte)
  - fixed-width integers (big-endian, two's complement)
  - byte and text sequences (4-byte length prefix)
  - floats (IEEE-754 big-endian, canonical NaN)
  - range and type violations
"""

import math
import struct
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplehash.core.bytesio import (
    encode_bool,
    encode_int,
    encode_length,
    encode_discriminant,
    encode_bytes,
    encode_text,
    encode_float,
    EncodingError,
)


# ═══════════════════════════════════════════════════════════════════════
# Booleans and integers
# ═══════════════════════════════════════════════════════════════════════

def test_bool_bytes():
    assert encode_bool(False) == b"\x00"
    assert encode_bool(True) == b"\x01"

    with pytest.raises(EncodingError):
        encode_bool(1)


@pytest.mark.parametrize("value, bits, signed, expected", [
    (8, 8, False, b"\x08"),
    (99, 16, False, b"\x00\x63"),
    (1, 32, False, b"\x00\x00\x00\x01"),
    (2**64 - 1, 64, False, b"\xff" * 8),
    (-1, 16, True, b"\xff\xff"),
    (-128, 8, True, b"\x80"),
    (-2, 32, True, b"\xff\xff\xff\xfe"),
    (127, 8, True, b"\x7f"),
])
def test_int_big_endian(value, bits, signed, expected):
    """N/8 bytes, most significant first."""
    assert encode_int(value, bits, signed) == expected


def test_int_out_of_range():
    with pytest.raises(EncodingError):
        encode_int(256, 8, False)
    with pytest.raises(EncodingError):
        encode_int(-1, 32, False)
    with pytest.raises(EncodingError):
        encode_int(128, 8, True)


def test_int_rejects_width_and_type():
    """Only 8/16/32/64-bit widths; bool is not an integer here."""
    with pytest.raises(EncodingError):
        encode_int(1, 24, False)
    with pytest.raises(EncodingError):
        encode_int(True, 8, False)
    with pytest.raises(EncodingError):
        encode_int(1.0, 8, False)


def test_length_and_discriminant():
    assert encode_length(0) == b"\x00\x00\x00\x00"
    assert encode_length(258) == b"\x00\x00\x01\x02"
    assert encode_discriminant(2) == b"\x00\x00\x00\x02"

    with pytest.raises(EncodingError):
        encode_length(2**32)


# ═══════════════════════════════════════════════════════════════════════
# Byte and text sequences
# ═══════════════════════════════════════════════════════════════════════

def test_bytes_length_prefixed():
    assert encode_bytes(b"") == b"\x00\x00\x00\x00"
    assert encode_bytes(b"ab") == b"\x00\x00\x00\x02ab"
    assert encode_bytes(bytearray(b"ab")) == encode_bytes(memoryview(b"ab"))


def test_text_prefix_counts_utf8_bytes():
    """'é' is one character, two UTF-8 bytes."""
    assert encode_text("é") == b"\x00\x00\x00\x02\xc3\xa9"
    assert encode_text("abc") == encode_bytes(b"abc")


def test_text_errors():
    with pytest.raises(EncodingError):
        encode_text(b"abc")
    with pytest.raises(EncodingError):
        encode_text("\ud800")


def test_adjacent_fields_do_not_collide():
    """("ab", "c") and ("a", "bc") differ once each part is prefixed."""
    left = encode_text("ab") + encode_text("c")
    right = encode_text("a") + encode_text("bc")

    assert left != right
    assert b"ab" + b"c" == b"a" + b"bc"


# ═══════════════════════════════════════════════════════════════════════
# Floats
# ═══════════════════════════════════════════════════════════════════════

def test_float_big_endian():
    assert encode_float(1.0, 64) == b"\x3f\xf0" + b"\x00" * 6
    assert encode_float(1.0, 32) == b"\x3f\x80\x00\x00"
    assert encode_float(math.inf, 32) == b"\x7f\x80\x00\x00"


def test_float_nan_is_canonical():
    """Every NaN bit pattern encodes to the quiet NaN."""
    negative_nan = struct.unpack(">d", b"\xff\xf8\x00\x00\x00\x00\x00\x01")[0]

    assert encode_float(float("nan"), 64) == b"\x7f\xf8" + b"\x00" * 6
    assert encode_float(negative_nan, 64) == encode_float(float("nan"), 64)
    assert encode_float(float("nan"), 32) == b"\x7f\xc0\x00\x00"


def test_float_signed_zero_distinct():
    assert encode_float(-0.0, 64) == b"\x80" + b"\x00" * 7
    assert encode_float(-0.0, 64) != encode_float(0.0, 64)


def test_float_errors():
    with pytest.raises(EncodingError):
        encode_float(1e300, 32)
    with pytest.raises(EncodingError):
        encode_float(1.0, 16)
    with pytest.raises(EncodingError):
        encode_float("1.0", 64)
