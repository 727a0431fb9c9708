"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Stable 64-bit hashing of canonical signature strings.

xxHash64 with a fixed seed: re-running on unchanged input reproduces identical
hashes on any machine, unlike Python's randomized built-in hash().
"""

import xxhash

SIGNATURE_HASH_SEED = 0


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl:
    @staticmethod
    def hash(data: bytes) -> int:
        return xxhash.xxh64_intdigest(data, seed=SIGNATURE_HASH_SEED)


def format_hash(value: int) -> str:
    """Fixed-width hex form used in log messages."""
    return f"{value:016x}"
