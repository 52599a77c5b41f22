"""Hashing utilities for pagelex.

Provides standardized hashing for cache keys and content fingerprinting.

Example:
    >>> from pagelex.utils.hashing import hash_str
    >>> hash_str("hello world", algorithm="md5")
    '5eb63bbbe01eeed093cb22bb8f5acdc3'
"""

import hashlib


def hash_str(
    content: str,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hash string content using specified algorithm.

    Args:
        content: String content to hash
        truncate: Truncate result to N characters (None = full hash)
        algorithm: Hash algorithm ('sha256', 'sha1', 'md5')

    Returns:
        Hex digest of hash, optionally truncated

    Examples:
        >>> hash_str("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
        >>> hash_str("hello", truncate=16)
        '2cf24dba5fb0a30e'
    """
    return hash_bytes(content.encode("utf-8"), truncate=truncate, algorithm=algorithm)


def hash_bytes(
    content: bytes,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hash bytes content using specified algorithm.

    Args:
        content: Bytes content to hash
        truncate: Truncate result to N characters (None = full hash)
        algorithm: Hash algorithm ('sha256', 'sha1', 'md5')

    Returns:
        Hex digest of hash, optionally truncated
    """
    hasher = hashlib.new(algorithm)
    hasher.update(content)
    digest = hasher.hexdigest()
    return digest[:truncate] if truncate is not None else digest


def hash_parts(*parts: str | bytes, algorithm: str = "sha1") -> str:
    """Hash several pieces in order as one digest.

    Used for composite cache keys (code + language + options).

    Examples:
        >>> hash_parts("a", "b") == hash_parts("ab")
        True
    """
    hasher = hashlib.new(algorithm)
    for part in parts:
        hasher.update(part.encode("utf-8") if isinstance(part, str) else part)
    return hasher.hexdigest()
