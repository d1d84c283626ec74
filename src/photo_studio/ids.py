"""Identifier generation."""

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 32


def generate_id(length: int = ID_LENGTH) -> str:
    """Return a random alphanumeric identifier."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
