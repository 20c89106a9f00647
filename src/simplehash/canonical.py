"""
Hashable capability and the digest entry points.

A Hashable value feeds its canonical byte representation into any open
Hasher. digest_of() owns the hasher for exactly one encode-then-finalize
cycle; hashers are never shared between computations.
"""

import abc
from typing import Any

from .core.hashing import Digest, Hasher, RecordingHasher, new_hasher


class Hashable(abc.ABC):
    """
    Capability: "can encode myself canonically into a Hasher".

    Implement encode() directly, or let @hashable derive it from the
    declared fields. encode() must be a pure function of the value.
    """

    __slots__ = ()

    @abc.abstractmethod
    def encode(self, hasher: Hasher) -> None:
        raise NotImplementedError

    def digest(self, algorithm=None) -> Digest:
        return digest_of(self, algorithm)


def encode(value: Any, hasher: Hasher, tp: Any = None) -> None:
    """
    Feed value's canonical encoding into hasher.

    Args:
        value: Value to encode.
        hasher: An open hasher.
        tp: Optional type annotation that selects the encoder (e.g. list[U32],
            Optional[str]). Without it the encoder is inferred from type(value).

    Raises:
        DerivationError: If tp has no canonical encoding.
        EncodingError: If value does not fit its encoder.
    """
    from .encoders import encode_dynamic, encoder_for

    if tp is None:
        encode_dynamic(value, hasher)
    else:
        encoder_for(tp)(value, hasher)


def digest_of(value: Any, algorithm=None, tp: Any = None) -> Digest:
    """
    Create a hasher, encode value into it, finalize.

    Args:
        value: Value to hash.
        algorithm: Algorithm name ("sha256", "sha512", "blake3"), a Hasher
            subclass, or None for the registry default.
        tp: Optional type annotation, as for encode().

    Returns:
        Digest: The finalized digest.

    Example:
        >>> from simplehash.types import U8
        >>> digest_of(U8(9)).hexdigest()
        '2b4c342f5433ebe591a1da77e013d1b72475562d48578dca8b84bac6651c3cb9'
    """
    hasher = new_hasher(algorithm)
    encode(value, hasher, tp)
    return hasher.finalize()


def canonical_bytes(value: Any, tp: Any = None) -> bytes:
    """Return the exact byte stream digest_of() would absorb."""
    hasher = RecordingHasher()
    encode(value, hasher, tp)
    return bytes(hasher.finalize())
