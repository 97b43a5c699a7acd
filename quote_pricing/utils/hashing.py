"""
Hashing utilities for quote auditability.
"""

from __future__ import annotations

import hashlib
import json

from pydantic import BaseModel


def sha256_hash(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of the given content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def model_digest(model: BaseModel) -> str:
    """
    Digest of a model's canonical JSON form, e.g. to pin the configuration
    a quote was priced with. Keys are sorted, so two tables that differ only
    in the order they were entered hash the same.
    """
    canonical = json.dumps(model.model_dump(mode="json"), sort_keys=True, separators=(",", ":"))
    return sha256_hash(canonical)
