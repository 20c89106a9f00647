"""
Fixed-width numeric types.

Python ints are unbounded, so the width that fixes a canonical encoding is
carried by the type: U8(8), I32(-1), F32(0.5). Each is a plain int/float
subclass, range-checked once at construction; arithmetic returns plain
int/float.
"""

from .core.bytesio import EncodingError


class FixedInt(int):
    """Base for fixed-width integers. BITS and SIGNED are set per subclass."""

    BITS = 0
    SIGNED = False

    def __new__(cls, value=0):
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{cls.__name__} requires an int, got {type(value).__name__}")
        if cls.SIGNED:
            lo, hi = -(1 << (cls.BITS - 1)), (1 << (cls.BITS - 1)) - 1
        else:
            lo, hi = 0, (1 << cls.BITS) - 1
        if not lo <= value <= hi:
            raise EncodingError(f"{value} out of range for {cls.__name__} [{lo}, {hi}]")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class U8(FixedInt):
    BITS, SIGNED = 8, False


class U16(FixedInt):
    BITS, SIGNED = 16, False


class U32(FixedInt):
    BITS, SIGNED = 32, False


class U64(FixedInt):
    BITS, SIGNED = 64, False


class I8(FixedInt):
    BITS, SIGNED = 8, True


class I16(FixedInt):
    BITS, SIGNED = 16, True


class I32(FixedInt):
    BITS, SIGNED = 32, True


class I64(FixedInt):
    BITS, SIGNED = 64, True


class FixedFloat(float):
    """Base for IEEE-754 floats of a declared width."""

    BITS = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({float(self)!r})"


class F32(FixedFloat):
    BITS = 32


class F64(FixedFloat):
    BITS = 64
