"""
Core Component: Encoding Parameter Registry

Frozen constants for canonical encoding.
Every byte-level choice (byte order, prefix widths, tag widths, float policy,
default algorithm) is defined here once, so that two builds agree on the
exact stream absorbed into a hasher.

No environment reads, no optionals.
"""

import json

import blake3


def param_registry() -> dict:
    """
    Returns a frozen mapping of all constants used by the canonical encoders.

    Keys and values are JSON-serializable primitives or lists.
    The registry fingerprint (registry_hash) changes whenever any of these
    values change, which marks an incompatible encoding version.

    Returns:
        dict: Frozen parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        # Version binding
        "encoding_version": "1",
        "endianness": "BE",  # all fixed-width numbers

        # Framing
        "length_prefix_bytes": 4,  # byte/text length, sequence count
        "union_discriminant_bytes": 4,  # variant position, uint32
        "option_tag_bytes": 1,  # 0x00 absent, 0x01 present
        "bool_bytes": [0, 1],  # [false, true]

        # Integers: two's complement for signed
        "int_widths": [8, 16, 32, 64],
        "signed_encoding": "twos-complement",

        # Text
        "text_encoding": "utf-8",

        # Floats: IEEE-754 bit pattern; all NaNs collapse to the quiet NaN
        "float_format": "ieee754-be",
        "float_nan": "canonical-quiet",

        # Hashing
        "default_hash_algo": "sha256",
        "hash_algos": ["sha256", "sha512", "blake3"],
    }

    required_keys = {
        "encoding_version", "endianness", "length_prefix_bytes",
        "union_discriminant_bytes", "option_tag_bytes", "bool_bytes",
        "int_widths", "signed_encoding", "text_encoding", "float_format",
        "float_nan", "default_hash_algo", "hash_algos"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    return registry


def registry_hash() -> str:
    """
    BLAKE3 fingerprint of the registry (stable JSON: sorted keys, compact).

    Two installations produce identical digests for identical values only if
    their registry hashes match.
    """
    data = json.dumps(
        param_registry(),
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':')
    ).encode('utf-8')
    hasher = blake3.blake3()
    hasher.update(data)
    return hasher.hexdigest()


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
