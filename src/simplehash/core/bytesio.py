"""
Core Component: Primitive Byte Encoding (Big-Endian)

Stable, platform-independent byte encodings for primitive values.

Rules (frozen in param_registry):
  - bool: one byte, 0x00 or 0x01
  - N-bit integer: N/8 bytes, big-endian, two's complement when signed
  - byte sequence / text: 4-byte big-endian length, then the raw bytes
    (UTF-8 for text)
  - float: IEEE-754 bit pattern, big-endian; NaN canonicalized

Variable-size data is always length-prefixed so adjacent fields never
run together.
"""

import math
import struct

from .registry import param_registry

_REGISTRY = param_registry()
_LENGTH_BYTES = _REGISTRY["length_prefix_bytes"]
_DISCRIMINANT_BYTES = _REGISTRY["union_discriminant_bytes"]
_BOOL_BYTES = bytes(_REGISTRY["bool_bytes"])
_INT_WIDTHS = frozenset(_REGISTRY["int_widths"])
_TEXT_ENCODING = _REGISTRY["text_encoding"]

_MAX_LENGTH = (1 << (8 * _LENGTH_BYTES)) - 1

# Quiet NaN bit patterns
_NAN_F32 = b"\x7f\xc0\x00\x00"
_NAN_F64 = b"\x7f\xf8\x00\x00\x00\x00\x00\x00"

OPTION_ABSENT = b"\x00"
OPTION_PRESENT = b"\x01"


def encode_bool(value: bool) -> bytes:
    """
    Encode a boolean as a single byte.

    Raises:
        EncodingError: If value is not a bool.
    """
    if not isinstance(value, bool):
        raise EncodingError(f"Expected bool, got {type(value).__name__}")
    return _BOOL_BYTES[1:2] if value else _BOOL_BYTES[0:1]


def encode_int(value: int, bits: int, signed: bool) -> bytes:
    """
    Encode an integer in exactly bits/8 bytes, big-endian.

    Args:
        value: Integer to encode (bool is rejected).
        bits: Width, one of 8, 16, 32, 64.
        signed: Two's complement if True.

    Returns:
        bytes: bits // 8 bytes.

    Raises:
        EncodingError: If width is unsupported or value is out of range.

    Example:
        >>> encode_int(99, 16, False)
        b'\\x00c'
        >>> encode_int(-1, 16, True)
        b'\\xff\\xff'
    """
    if bits not in _INT_WIDTHS:
        raise EncodingError(f"Unsupported integer width: {bits}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Expected int for {bits}-bit field, got {type(value).__name__}")
    try:
        return int(value).to_bytes(bits // 8, byteorder='big', signed=signed)
    except OverflowError:
        kind = "i" if signed else "u"
        raise EncodingError(f"Value {value} out of range for {kind}{bits}") from None


def encode_length(n: int) -> bytes:
    """
    Encode a length or element count as the fixed-width prefix.

    Raises:
        EncodingError: If n exceeds the prefix range.
    """
    if n < 0 or n > _MAX_LENGTH:
        raise EncodingError(f"Length {n} does not fit in a {_LENGTH_BYTES}-byte prefix")
    return n.to_bytes(_LENGTH_BYTES, byteorder='big')


def encode_discriminant(index: int) -> bytes:
    """Encode a union variant position (declaration index)."""
    return index.to_bytes(_DISCRIMINANT_BYTES, byteorder='big')


def encode_bytes(value) -> bytes:
    """
    Length-prefixed raw bytes. Accepts bytes, bytearray, memoryview.

    Raises:
        EncodingError: If value is not bytes-like or is too long.
    """
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise EncodingError(f"Expected bytes, got {type(value).__name__}")
    raw = bytes(value)
    return encode_length(len(raw)) + raw


def encode_text(value: str) -> bytes:
    """
    Length-prefixed UTF-8. The prefix counts bytes, not characters.

    Raises:
        EncodingError: If value is not a str or cannot be encoded.
    """
    if not isinstance(value, str):
        raise EncodingError(f"Expected str, got {type(value).__name__}")
    try:
        raw = value.encode(_TEXT_ENCODING)
    except UnicodeEncodeError as e:
        # lone surrogates
        raise EncodingError(f"Text is not valid {_TEXT_ENCODING}: {e}") from None
    return encode_length(len(raw)) + raw


def encode_float(value: float, bits: int) -> bytes:
    """
    Encode an IEEE-754 float, big-endian.

    All NaNs map to the quiet NaN; -0.0 keeps its sign bit.

    Raises:
        EncodingError: If width is not 32/64, value is not a real number,
            or a finite value overflows binary32.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EncodingError(f"Expected float, got {type(value).__name__}")
    if bits == 32:
        if math.isnan(value):
            return _NAN_F32
        try:
            return struct.pack(">f", value)
        except OverflowError:
            raise EncodingError(f"Value {value} out of range for f32") from None
    if bits == 64:
        if math.isnan(value):
            return _NAN_F64
        try:
            return struct.pack(">d", value)
        except OverflowError:
            raise EncodingError(f"Value {value} out of range for f64") from None
    raise EncodingError(f"Unsupported float width: {bits}")


class EncodingError(Exception):
    """Raised when a value does not fit the encoder chosen for it."""
    pass
