"""SHA-256 hashing of raw note text"""

import hashlib


def sha256(content: str) -> str:
    """Return the hex-encoded SHA-256 of content; identical notes hash identically."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
