"""
simplehash: canonical digests of structured Python values.

Two independent choices: the hash algorithm (a Hasher) and the canonical
byte encoding of a value (a Hashable, hand-written or derived with
@hashable).
"""

import logging

__version__ = "0.1.0"

from .core import (
    Digest,
    Hasher,
    Sha256Hasher,
    Sha512Hasher,
    Blake3Hasher,
    RecordingHasher,
    get_hasher,
    param_registry,
    registry_hash,
    assert_double_run_equal,
    EncodingError,
    HashingError,
    HasherStateError,
    UnknownAlgorithmError,
    DeterminismError
)
from .types import U8, U16, U32, U64, I8, I16, I32, I64, F32, F64
from .canonical import Hashable, encode, digest_of, canonical_bytes
from .encoders import encoder_for, DerivationError
from .derive import hashable, TaggedUnion

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Hashers
    "Digest",
    "Hasher",
    "Sha256Hasher",
    "Sha512Hasher",
    "Blake3Hasher",
    "RecordingHasher",
    "get_hasher",

    # Configuration
    "param_registry",
    "registry_hash",

    # Fixed-width types
    "U8", "U16", "U32", "U64",
    "I8", "I16", "I32", "I64",
    "F32", "F64",

    # Hashable
    "Hashable",
    "encode",
    "digest_of",
    "canonical_bytes",
    "encoder_for",

    # Derivation
    "hashable",
    "TaggedUnion",

    # Errors
    "EncodingError",
    "HashingError",
    "HasherStateError",
    "UnknownAlgorithmError",
    "DerivationError",
    "DeterminismError",

    # Determinism
    "assert_double_run_equal",
]
