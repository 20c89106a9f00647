"""
@hashable: derive a canonical encoder from a type's declared shape.

Records (dataclasses, NamedTuples) encode each field in declaration order.
Tagged unions (TaggedUnion subclasses) encode the variant's declaration
position as a 4-byte discriminant, then its payload.

Every field type is resolved when the decorator runs; a field with no
canonical encoding raises DerivationError there, never while hashing.

Example:
    >>> from dataclasses import dataclass
    >>> from simplehash.types import U8, U16, U32
    >>> @hashable
    ... @dataclass
    ... class Foo:
    ...     a: U8
    ...     b: U16
    ...     c: list[U32]
    >>> Foo(U8(8), U16(99), [U32(i) for i in range(4)]).digest().hexdigest()
    '3f6444c91bb59b09ff7b28c11a33eab5689956383381b6b1d0949a2d6f2d6d87'
"""

import dataclasses
import logging
import typing

from .canonical import Hashable, digest_of
from .core.bytesio import EncodingError
from .encoders import (
    SHAPE_ATTR,
    DerivationError,
    RecordShape,
    UnionShape,
    build_shape_encoder,
)

logger = logging.getLogger(__name__)

_RESERVED_VARIANTS = frozenset({"tag", "value", "index", "encode", "digest"})


class TaggedUnion:
    """
    Base for tagged unions. Declare variants as class annotations, in order:

        @hashable
        class Shape(TaggedUnion):
            Circle: U32
            Rect: tuple[U32, U32]
            Empty: None

    @hashable generates Shape.Circle(payload) constructors; unit variants
    (payload None) become singleton instances (Shape.Empty).
    """

    __slots__ = ("_tag", "_value")

    def __init__(self, tag: str, value=None):
        shape = getattr(type(self), SHAPE_ATTR, None)
        if shape is None:
            raise DerivationError(f"{type(self).__qualname__} is not decorated with @hashable")
        if tag not in shape.index:
            raise EncodingError(f"{type(self).__qualname__} has no variant '{tag}'")
        object.__setattr__(self, "_tag", tag)
        object.__setattr__(self, "_value", value)

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def value(self):
        return self._value

    @property
    def index(self) -> int:
        """Declaration position of the active variant."""
        return getattr(type(self), SHAPE_ATTR).index[self._tag]

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__qualname__} is immutable")

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._tag == other._tag and self._value == other._value

    def __hash__(self):
        return hash((type(self), self._tag, self._value))

    def __repr__(self) -> str:
        name = f"{type(self).__qualname__}.{self._tag}"
        variants = dict(getattr(type(self), SHAPE_ATTR).variants)
        if variants[self._tag] is type(None):
            return name
        return f"{name}({self._value!r})"


def hashable(cls):
    """
    Class decorator deriving encode() and digest() for a record or union.

    Apply it above @dataclass. The class gains encode(hasher) and
    digest(algorithm=None) and is registered as a Hashable.

    Raises:
        DerivationError: If the class is not a dataclass, NamedTuple or
            TaggedUnion subclass, defines encode() itself, or has a field
            whose type has no canonical encoding.
    """
    if not isinstance(cls, type):
        raise DerivationError(f"@hashable expects a class, got {cls!r}")
    if "encode" in vars(cls):
        raise DerivationError(
            f"{cls.__qualname__} defines encode(); derive it or implement it, not both"
        )

    hints = _type_hints(cls)
    params = tuple(getattr(cls, "__parameters__", ()))

    if issubclass(cls, TaggedUnion):
        if not hints:
            raise DerivationError(f"{cls.__qualname__} declares no variants")
        clashes = sorted(set(hints) & _RESERVED_VARIANTS)
        if clashes:
            raise DerivationError(
                f"{cls.__qualname__}: variant names {clashes} shadow TaggedUnion attributes"
            )
        shape = UnionShape(cls, tuple(hints.items()), params)
    elif dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
        shape = RecordShape(cls, tuple((name, hints[name]) for name in names), params)
    elif issubclass(cls, tuple) and hasattr(cls, "_fields"):
        shape = RecordShape(cls, tuple((name, hints[name]) for name in cls._fields), params)
    else:
        raise DerivationError(
            f"@hashable needs a dataclass, NamedTuple or TaggedUnion subclass, "
            f"got {cls.__qualname__} (apply @hashable above @dataclass)"
        )

    # Shape first, so self-referential fields resolve to this class
    setattr(cls, SHAPE_ATTR, shape)
    try:
        encoder = build_shape_encoder(shape, {})
    except DerivationError:
        delattr(cls, SHAPE_ATTR)
        raise

    def encode(self, hasher):
        encoder(self, hasher)

    def digest(self, algorithm=None):
        return digest_of(self, algorithm)

    encode.__qualname__ = f"{cls.__qualname__}.encode"
    cls.encode = encode
    if "digest" not in vars(cls):
        digest.__qualname__ = f"{cls.__qualname__}.digest"
        cls.digest = digest

    if isinstance(shape, UnionShape):
        _install_variants(cls, shape)

    Hashable.register(cls)

    members = shape.fields if isinstance(shape, RecordShape) else shape.variants
    logger.debug(
        "Derived %s encoder for %s: %s",
        "record" if isinstance(shape, RecordShape) else "union",
        cls.__qualname__,
        [name for name, _ in members],
    )
    return cls


def _type_hints(cls) -> dict:
    try:
        return typing.get_type_hints(cls, localns={cls.__name__: cls})
    except NameError as e:
        raise DerivationError(f"{cls.__qualname__}: {e}") from e


def _install_variants(cls, shape: UnionShape) -> None:
    for name, payload in shape.variants:
        if payload is type(None):
            setattr(cls, name, cls(name))
        else:
            setattr(cls, name, staticmethod(_variant_constructor(cls, name)))


def _variant_constructor(cls, tag):
    def construct(value):
        return cls(tag, value)

    construct.__name__ = tag
    construct.__qualname__ = f"{cls.__qualname__}.{tag}"
    return construct
