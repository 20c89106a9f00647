"""
Type-directed composite encoders.

encoder_for() turns a type annotation into an encode function
(value, hasher) -> None. Resolution happens once, when a type is derived,
so an unsupported field type fails at definition time, not while hashing.

Composite rules:
  - sequence: 4-byte BE element count, then each element in iteration order
  - option: 0x00 absent | 0x01 + payload
  - fixed tuple / record: concatenation of the member encodings
  - tagged union: 4-byte BE discriminant (declaration position) + payload
"""

import collections.abc
import dataclasses
import enum
import functools
import types
import typing
from typing import Any, Callable, TypeVar

from .canonical import Hashable
from .core.bytesio import (
    OPTION_ABSENT,
    OPTION_PRESENT,
    EncodingError,
    encode_bool,
    encode_bytes,
    encode_discriminant,
    encode_float,
    encode_int,
    encode_length,
    encode_text,
)
from .core.hashing import Hasher
from .types import FixedFloat, FixedInt

Encoder = Callable[[Any, Hasher], None]

SHAPE_ATTR = "__simplehash_shape__"

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_UNION_ORIGINS = (typing.Union, types.UnionType)


# ============================================================================
# Shapes (declared structure of derived types)
# ============================================================================

@dataclasses.dataclass(frozen=True)
class RecordShape:
    """Fields as (name, annotation) pairs, in declaration order."""

    cls: type
    fields: tuple
    params: tuple = ()


@dataclasses.dataclass(frozen=True)
class UnionShape:
    """Variants as (name, payload annotation) pairs, in declaration order."""

    cls: type
    variants: tuple
    params: tuple = ()

    @property
    def index(self) -> dict:
        return {name: i for i, (name, _) in enumerate(self.variants)}


def build_shape_encoder(shape, typevars: dict) -> Encoder:
    """
    Build the encoder for a derived record or union.

    Args:
        shape: RecordShape or UnionShape.
        typevars: TypeVar -> Encoder substitutions; unmapped TypeVars
            dispatch on the runtime type of the value.

    Raises:
        DerivationError: Naming the class and member that failed to resolve.
    """
    cls = shape.cls
    members = shape.fields if isinstance(shape, RecordShape) else shape.variants

    encoders = []
    for name, annotation in members:
        try:
            encoders.append(encoder_for(annotation, typevars))
        except DerivationError as e:
            raise DerivationError(f"{cls.__qualname__}.{name}: {e}") from e

    if isinstance(shape, RecordShape):
        return record_encoder(cls, [name for name, _ in members], encoders)
    return union_encoder(cls, [name for name, _ in members], encoders)


def record_encoder(cls: type, names: list, encoders: list) -> Encoder:
    fields = list(zip(names, encoders))

    def encode_record(value, hasher):
        # Undecorated subclasses would drop their own fields
        if type(value) is not cls:
            raise EncodingError(f"Expected {cls.__qualname__}, got {type(value).__qualname__}")
        for name, encoder in fields:
            encoder(getattr(value, name), hasher)

    return encode_record


def union_encoder(cls: type, names: list, encoders: list) -> Encoder:
    positions = {name: i for i, name in enumerate(names)}

    def encode_union(value, hasher):
        if type(value) is not cls:
            raise EncodingError(f"Expected {cls.__qualname__}, got {type(value).__qualname__}")
        index = positions.get(value.tag)
        if index is None:
            raise EncodingError(f"{cls.__qualname__} has no variant '{value.tag}'")
        hasher.absorb(encode_discriminant(index))
        encoders[index](value.value, hasher)

    return encode_union


# ============================================================================
# Primitive encoders
# ============================================================================

def encode_unit(value, hasher):
    """None / unit payload: zero bytes."""
    if value is not None:
        raise EncodingError(f"Expected None, got {type(value).__name__}")


def _encode_bool(value, hasher):
    hasher.absorb(encode_bool(value))


def _encode_bytes(value, hasher):
    hasher.absorb(encode_bytes(value))


def _encode_text(value, hasher):
    hasher.absorb(encode_text(value))


def int_encoder(bits: int, signed: bool) -> Encoder:
    def encode_fixed_int(value, hasher):
        hasher.absorb(encode_int(value, bits, signed))

    return encode_fixed_int


def float_encoder(bits: int) -> Encoder:
    def encode_fixed_float(value, hasher):
        hasher.absorb(encode_float(value, bits))

    return encode_fixed_float


def enum_encoder(cls: type) -> Encoder:
    # Aliases are not members; position follows definition order
    positions = {member: i for i, member in enumerate(cls)}

    def encode_enum(value, hasher):
        if not isinstance(value, cls):
            raise EncodingError(f"Expected {cls.__qualname__}, got {type(value).__name__}")
        hasher.absorb(encode_discriminant(positions[value]))

    return encode_enum


def encode_hashable(value, hasher):
    """Delegate to the value's own encode(): derived or hand-written."""
    if not isinstance(value, Hashable):
        raise EncodingError(f"{type(value).__name__} does not implement Hashable")
    value.encode(hasher)


# ============================================================================
# Composite encoders
# ============================================================================

def sequence_encoder(item_encoder: Encoder) -> Encoder:
    def encode_sequence(value, hasher):
        if isinstance(value, (str, bytes, bytearray)) or not isinstance(
            value, collections.abc.Sequence
        ):
            raise EncodingError(f"Expected a sequence, got {type(value).__name__}")
        hasher.absorb(encode_length(len(value)))
        for item in value:
            item_encoder(item, hasher)

    return encode_sequence


def option_encoder(inner: Encoder) -> Encoder:
    def encode_option(value, hasher):
        if value is None:
            hasher.absorb(OPTION_ABSENT)
        else:
            hasher.absorb(OPTION_PRESENT)
            inner(value, hasher)

    return encode_option


def tuple_encoder(encoders: list) -> Encoder:
    arity = len(encoders)

    def encode_tuple(value, hasher):
        if not isinstance(value, tuple):
            raise EncodingError(f"Expected a tuple, got {type(value).__name__}")
        if len(value) != arity:
            raise EncodingError(f"Expected a {arity}-tuple, got {len(value)} items")
        for item, encoder in zip(value, encoders):
            encoder(item, hasher)

    return encode_tuple


def member_union_encoder(members: list, typevars: dict) -> Encoder:
    """
    Encoder for A | B | ...: discriminant is the position of the member
    whose runtime class matches the value (exact type first, then isinstance).
    """
    checks = []
    for member in members:
        runtime = _runtime_class(member)
        if runtime is None:
            raise DerivationError(f"Union member {member!r} cannot be told apart at runtime")
        if any(runtime is seen for seen, _ in checks):
            raise DerivationError(
                f"Ambiguous union: more than one member is a {runtime.__name__}"
            )
        checks.append((runtime, encoder_for(member, typevars)))

    def encode_member(value, hasher):
        index = next(
            (i for i, (runtime, _) in enumerate(checks) if type(value) is runtime),
            None,
        )
        if index is None:
            index = next(
                (i for i, (runtime, _) in enumerate(checks) if isinstance(value, runtime)),
                None,
            )
        if index is None:
            raise EncodingError(f"{type(value).__name__} matches no union member")
        hasher.absorb(encode_discriminant(index))
        checks[index][1](value, hasher)

    return encode_member


def _runtime_class(annotation):
    if isinstance(annotation, TypeVar):
        return None
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _runtime_class(typing.get_args(annotation)[0])
    if origin is None:
        if annotation is type(None):
            return None
        return annotation if isinstance(annotation, type) else None
    return origin if isinstance(origin, type) else None


# ============================================================================
# Resolution
# ============================================================================

def encoder_for(tp, typevars: dict | None = None) -> Encoder:
    """
    Resolve a type annotation to its canonical encoder.

    Args:
        tp: Annotation (class, generic alias, union, TypeVar, None).
        typevars: TypeVar -> Encoder substitutions from an enclosing
            specialization.

    Returns:
        Encoder: (value, hasher) -> None.

    Raises:
        DerivationError: If tp, or any type nested in it, has no canonical
            encoding.
    """
    if typevars is None:
        typevars = {}

    if isinstance(tp, TypeVar):
        return typevars.get(tp, encode_dynamic)
    if tp is None or tp is type(None):
        return encode_unit
    if tp is Any:
        return encode_dynamic
    if isinstance(tp, (str, typing.ForwardRef)):
        raise DerivationError(f"Unresolved forward reference {tp!r}")

    origin = typing.get_origin(tp)
    if origin is None:
        return class_encoder(tp)

    args = typing.get_args(tp)

    if origin is typing.Annotated:
        return encoder_for(args[0], typevars)

    if origin in _UNION_ORIGINS:
        members = [a for a in args if a is not type(None)]
        if len(members) == len(args):
            return member_union_encoder(members, typevars)
        # Optional[T], or Optional[A | B]
        if len(members) == 1:
            return option_encoder(encoder_for(members[0], typevars))
        return option_encoder(member_union_encoder(members, typevars))

    if origin is tuple:
        if tp is typing.Tuple:
            return encode_dynamic_tuple
        if len(args) == 2 and args[1] is Ellipsis:
            return sequence_encoder(encoder_for(args[0], typevars))
        if args == ((),):
            return tuple_encoder([])
        return tuple_encoder([encoder_for(a, typevars) for a in args])

    if origin in _SEQUENCE_ORIGINS:
        if not args:
            return sequence_encoder(encode_dynamic)
        return sequence_encoder(encoder_for(args[0], typevars))

    if isinstance(origin, type) and hasattr(origin, SHAPE_ATTR):
        return _specialized_encoder(origin, args, typevars)

    if isinstance(origin, type) and issubclass(origin, Hashable):
        # Hand-written generic: parameters are checked, encode() decides
        for arg in args:
            encoder_for(arg, typevars)
        return encode_hashable

    raise DerivationError(f"No canonical encoding for {tp!r}")


def class_encoder(cls) -> Encoder:
    """
    Encoder for a plain (unparameterized) class.

    Derived and Hashable classes are resolved on every call: a class can gain
    or lose its shape while @hashable runs.
    """
    if not isinstance(cls, type):
        raise DerivationError(f"No canonical encoding for {cls!r}")
    if SHAPE_ATTR in vars(cls):
        return encode_hashable
    if hasattr(cls, SHAPE_ATTR):
        base = getattr(cls, SHAPE_ATTR).cls
        raise DerivationError(
            f"{cls.__qualname__} subclasses @hashable {base.__qualname__} "
            f"and must be decorated with @hashable itself"
        )
    if issubclass(cls, Hashable):
        return encode_hashable
    return _builtin_encoder(cls)


@functools.lru_cache(maxsize=None)
def _builtin_encoder(cls) -> Encoder:
    if cls is bool:
        return _encode_bool
    if issubclass(cls, FixedInt):
        return int_encoder(cls.BITS, cls.SIGNED)
    if issubclass(cls, FixedFloat):
        return float_encoder(cls.BITS)
    if issubclass(cls, enum.Enum):
        return enum_encoder(cls)
    if issubclass(cls, (bytes, bytearray, memoryview)):
        return _encode_bytes
    if issubclass(cls, str):
        return _encode_text
    if cls is float:
        return float_encoder(64)
    if cls is list:
        return sequence_encoder(encode_dynamic)
    if cls is tuple:
        return encode_dynamic_tuple
    if cls is type(None):
        return encode_unit
    if issubclass(cls, int):
        raise DerivationError(
            f"{cls.__name__} has no fixed width; use U8, U16, U32, U64, I8, I16, I32 or I64"
        )
    raise DerivationError(f"{cls.__qualname__} does not implement Hashable")


def encode_dynamic(value, hasher):
    """Encode by the runtime type of value (unparameterized generics, Any)."""
    try:
        encoder = class_encoder(type(value))
    except DerivationError as e:
        raise EncodingError(f"Cannot encode {type(value).__name__} value: {e}") from None
    encoder(value, hasher)


def encode_dynamic_tuple(value, hasher):
    for item in value:
        encode_dynamic(item, hasher)


def _specialized_encoder(origin: type, args: tuple, typevars: dict) -> Encoder:
    """
    Encoder for a derived generic used with arguments, e.g. Pair[U8].

    Arguments are resolved now; the body is built on first use so that
    self-referential generics (Tree[T] holding list[Tree[T]]) terminate.
    """
    shape = getattr(origin, SHAPE_ATTR)
    if len(args) != len(shape.params):
        raise DerivationError(
            f"{origin.__qualname__} takes {len(shape.params)} type parameters, got {len(args)}"
        )
    mapping = dict(zip(shape.params, [encoder_for(a, typevars) for a in args]))
    built = None

    def encode_specialized(value, hasher):
        nonlocal built
        if built is None:
            built = build_shape_encoder(shape, mapping)
        built(value, hasher)

    return encode_specialized


class DerivationError(Exception):
    """Raised when a type has no canonical encoding (definition-time)."""
    pass
