"""Deterministic short identifiers for programs."""

import hashlib

HASH_LENGTH = 8


def generate_hash(name: str) -> str:
    """Return the short hex fingerprint used as a program's catalog key.

    The same name always yields the same identifier, across runs and machines.
    """
    return hashlib.sha256(name.encode("utf-8")).hexdigest()[:HASH_LENGTH]
