"""
Core foundation: encoding registry, hashers, primitive byte encoders,
determinism checks.
"""

from .registry import param_registry, registry_hash, RegistryError
from .hashing import (
    Digest,
    Hasher,
    Sha256Hasher,
    Sha512Hasher,
    Blake3Hasher,
    RecordingHasher,
    get_hasher,
    new_hasher,
    HashingError,
    HasherStateError,
    UnknownAlgorithmError
)
from .bytesio import (
    encode_bool,
    encode_int,
    encode_length,
    encode_discriminant,
    encode_bytes,
    encode_text,
    encode_float,
    EncodingError
)
from .receipts import assert_double_run_equal, DeterminismError

__all__ = [
    # Registry
    "param_registry",
    "registry_hash",
    "RegistryError",

    # Hashing
    "Digest",
    "Hasher",
    "Sha256Hasher",
    "Sha512Hasher",
    "Blake3Hasher",
    "RecordingHasher",
    "get_hasher",
    "new_hasher",
    "HashingError",
    "HasherStateError",
    "UnknownAlgorithmError",

    # Primitive encoding
    "encode_bool",
    "encode_int",
    "encode_length",
    "encode_discriminant",
    "encode_bytes",
    "encode_text",
    "encode_float",
    "EncodingError",

    # Determinism
    "assert_double_run_equal",
    "DeterminismError",
]
