"""Hashing utilities."""

import hashlib


def generate_content_hash(content: str) -> str:
    """Return the SHA-256 hex digest of chunk text (UTF-8)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
