"""
Core Component: Double-Run Determinism Checker

Builds a value twice, digests both, and compares.
Same logical value -> same canonical bytes -> same digest, always.

No timestamps, no memory addresses, no environment leakage.
"""

from typing import Any, Callable


def assert_double_run_equal(build_value: Callable[[], Any], algorithm=None, tp: Any = None) -> str:
    """
    Calls build_value() twice and verifies identical digests.

    Args:
        build_value: Function that builds and returns a fresh value.
        algorithm: Algorithm name or Hasher subclass (None: registry default).
        tp: Optional type annotation selecting the encoder.

    Returns:
        str: The (shared) hex digest.

    Raises:
        DeterminismError: If the digests differ.

    Example:
        >>> from simplehash.types import U8
        >>> assert_double_run_equal(lambda: [U8(1), U8(2)])[:8]
        '4109e4fd'
    """
    from ..canonical import canonical_bytes, digest_of

    value_a = build_value()
    value_b = build_value()

    hash_a = digest_of(value_a, algorithm, tp).hexdigest()
    hash_b = digest_of(value_b, algorithm, tp).hexdigest()

    if hash_a != hash_b:
        bytes_a = canonical_bytes(value_a, tp)
        bytes_b = canonical_bytes(value_b, tp)

        # First differing byte offset in the canonical stream
        offset = next(
            (i for i, (x, y) in enumerate(zip(bytes_a, bytes_b)) if x != y),
            min(len(bytes_a), len(bytes_b))
        )

        raise DeterminismError(
            first_differing_offset=offset,
            length_a=len(bytes_a),
            length_b=len(bytes_b),
            hash_a=hash_a,
            hash_b=hash_b
        )

    return hash_a


class DeterminismError(Exception):
    """Raised when double-run produces different digests."""

    def __init__(
        self,
        first_differing_offset: int,
        length_a: int,
        length_b: int,
        hash_a: str,
        hash_b: str
    ):
        self.first_differing_offset = first_differing_offset
        self.length_a = length_a
        self.length_b = length_b
        self.hash_a = hash_a
        self.hash_b = hash_b

        msg = (
            f"Double-run digest mismatch.\n"
            f"  First differing byte: {first_differing_offset}\n"
            f"  Stream lengths: {length_a} / {length_b}\n"
            f"  Hash A: {hash_a}\n"
            f"  Hash B: {hash_b}"
        )
        super().__init__(msg)
