"""Content hashing utilities.

Truncated SHA-256 digests are used for every fingerprint in the lineage
system so that identical inputs always map to identical identifiers.
"""

import hashlib


def compute_string_hash(text: str) -> str:
    """Compute SHA-256 hash of string (UTF-8 encoded).

    Args:
        text: String to hash

    Returns:
        64-character hexadecimal hash string

    Example:
        >>> compute_string_hash("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def compute_short_hash(text: str, length: int = 16) -> str:
    """Compute a truncated SHA-256 hash of a string.

    Args:
        text: String to hash
        length: Number of hex characters to keep

    Returns:
        Hexadecimal prefix of the full digest

    Example:
        >>> compute_short_hash("hello", 12)
        '2cf24dba5fb0'
    """
    return compute_string_hash(text)[:length]
