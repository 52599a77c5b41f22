"""Utility modules for pagelex.

Provides:
- hashing: hash_str, hash_bytes, hash_parts for cache keys
- logger: get_logger for logging
"""

from pagelex.utils.hashing import hash_bytes, hash_parts, hash_str
from pagelex.utils.logger import get_logger

__all__ = [
    "get_logger",
    "hash_bytes",
    "hash_parts",
    "hash_str",
]
