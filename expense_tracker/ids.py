"""Record identifier generation."""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 9


def generate_id() -> str:
    """Return a new record id.

    The id is the current time in milliseconds followed by nine random
    base-36 characters.  Collisions are not checked.
    """
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{int(time.time() * 1000)}{suffix}"
