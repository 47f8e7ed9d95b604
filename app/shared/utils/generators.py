"""Primary key generator for accounts and token rows."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """New CUID2 string (25 chars, URL safe, not time-ordered)."""
    return str(_next_cuid())
