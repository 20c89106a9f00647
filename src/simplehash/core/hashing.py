"""
Core Component: Hashers and Digests

A Hasher wraps a streaming hash algorithm: absorb() appends bytes,
finalize() yields exactly one Digest. The open -> finalized transition is
enforced here, once, for every algorithm.

No seeding, no personalization, no timestamps.
"""

import abc
import hashlib

import blake3

from .registry import param_registry


class Digest(bytes):
    """
    Fixed-length hash output. Compares byte-for-byte with any bytes object.

    Example:
        >>> Digest(b"\\x09").hexdigest()
        '09'
    """

    def hexdigest(self) -> str:
        """Lowercase hex, no separators, 2 * len(self) characters."""
        return self.hex()

    def __repr__(self) -> str:
        return f"Digest('{self.hex()}')"


class Hasher(abc.ABC):
    """
    Streaming hash state, owned by a single digest computation.

    Subclasses implement _update() and _finish(); the public absorb() and
    finalize() guard the state machine so that a finalized hasher can never
    silently take more input.
    """

    name: str = ""
    digest_size: int = 0

    def __init__(self):
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def absorb(self, data: bytes) -> None:
        """
        Append a byte sequence to the algorithm state.

        Raises:
            HasherStateError: If the hasher was already finalized.
        """
        if self._finalized:
            raise HasherStateError(f"absorb() on finalized {self.name} hasher")
        self._update(data)

    def finalize(self) -> Digest:
        """
        Consume the state and return the digest. Callable exactly once.

        Raises:
            HasherStateError: If the hasher was already finalized.
        """
        if self._finalized:
            raise HasherStateError(f"finalize() called twice on {self.name} hasher")
        self._finalized = True
        return Digest(self._finish())

    @abc.abstractmethod
    def _update(self, data: bytes) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def _finish(self) -> bytes:
        raise NotImplementedError


class Sha256Hasher(Hasher):
    name = "sha256"
    digest_size = 32

    def __init__(self):
        super().__init__()
        self._state = hashlib.sha256()

    def _update(self, data: bytes) -> None:
        self._state.update(data)

    def _finish(self) -> bytes:
        return self._state.digest()


class Sha512Hasher(Hasher):
    name = "sha512"
    digest_size = 64

    def __init__(self):
        super().__init__()
        self._state = hashlib.sha512()

    def _update(self, data: bytes) -> None:
        self._state.update(data)

    def _finish(self) -> bytes:
        return self._state.digest()


class Blake3Hasher(Hasher):
    """BLAKE3-256, unkeyed, default output length."""

    name = "blake3"
    digest_size = 32

    def __init__(self):
        super().__init__()
        self._state = blake3.blake3()

    def _update(self, data: bytes) -> None:
        self._state.update(data)

    def _finish(self) -> bytes:
        return self._state.digest()


class RecordingHasher(Hasher):
    """
    Transcript hasher: keeps the raw absorbed stream.

    finalize() returns the stream itself, so the "digest" is the exact
    canonical encoding. Used to inspect framing, never for integrity.
    """

    name = "recording"
    digest_size = 0

    def __init__(self):
        super().__init__()
        self._buffer = bytearray()

    def _update(self, data: bytes) -> None:
        self._buffer.extend(data)

    def _finish(self) -> bytes:
        return bytes(self._buffer)


_HASHERS = {
    "sha256": Sha256Hasher,
    "sha512": Sha512Hasher,
    "blake3": Blake3Hasher,
}


def get_hasher(name: str | None = None) -> type[Hasher]:
    """
    Return the Hasher class registered under name.

    Args:
        name: Algorithm name; None selects the registry default.

    Raises:
        UnknownAlgorithmError: If name is not one of the registered algorithms.
    """
    registry = param_registry()
    if name is None:
        name = registry["default_hash_algo"]
    key = name.lower()
    if key not in registry["hash_algos"] or key not in _HASHERS:
        raise UnknownAlgorithmError(
            f"Unknown hash algorithm '{name}'. Available: {registry['hash_algos']}"
        )
    return _HASHERS[key]


def new_hasher(algorithm: "str | type[Hasher] | None" = None) -> Hasher:
    """Create a fresh, open hasher from a name or a Hasher subclass."""
    if isinstance(algorithm, type):
        if not issubclass(algorithm, Hasher):
            raise UnknownAlgorithmError(f"{algorithm!r} is not a Hasher subclass")
        return algorithm()
    return get_hasher(algorithm)()


class HashingError(Exception):
    """Base class for hasher misuse."""
    pass


class HasherStateError(HashingError):
    """Raised on absorb() or finalize() after finalize()."""
    pass


class UnknownAlgorithmError(HashingError):
    """Raised when an algorithm name is not registered."""
    pass
