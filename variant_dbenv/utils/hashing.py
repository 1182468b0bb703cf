"""Hashing helpers for variant identifiers"""
import hashlib


def sha1_upper_hex(summary: str) -> str:
    """SHA-1 of a summary string as upper-case hex, the format used for variant ids."""
    return hashlib.sha1(summary.encode("utf-8")).hexdigest().upper()
