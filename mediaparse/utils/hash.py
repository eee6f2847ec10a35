"""Hashing utilities."""
import hashlib


def sha256_key(*parts: str) -> str:
    """Generate a SHA-256 hex digest over the concatenation of ``parts``."""
    return hashlib.sha256("".join(parts).encode("utf-8")).hexdigest()
