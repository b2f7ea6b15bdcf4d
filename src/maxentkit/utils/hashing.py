"""
Deterministic hashing utilities.

Python's built-in ``hash`` for strings is salted per process, so anything
that must lay out identically across runs (hash table slots, event digests)
uses the helpers here instead.
"""

import hashlib
from collections.abc import Iterable


def java_string_hash(value: str) -> int:
    """
    Compute the 32-bit ``String.hashCode`` of a string.

    The hash iterates over UTF-16 code units, lone surrogates included,
    and returns a signed 32-bit integer.

    Args:
        value: String to hash.

    Returns:
        Signed 32-bit hash.
    """
    h = 0
    data = value.encode("utf-16-be", "surrogatepass")
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def hash_strings(values: Iterable[str]) -> str:
    """
    Compute the MD5 hex digest of a sequence of strings.

    Args:
        values: Strings to feed into the digest, in order.

    Returns:
        Hex digest string.
    """
    hasher = hashlib.md5()
    for value in values:
        hasher.update(value.encode("utf-8"))
    return hasher.hexdigest()
