"""
Identifier generation for sessions and thoughts.
"""

import re
import secrets
from typing import Callable, Optional

from .timestamp_utils import to_epoch_ms

BASE36_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'
SUFFIX_LENGTH = 5
MAX_GENERATION_ATTEMPTS = 10

_SESSION_ID_PATTERN = re.compile(r'^[A-Za-z0-9_\-][A-Za-z0-9_.\-]{0,127}$')


def generate_id(prefix: str, timestamp: Optional[float] = None) -> str:
    """Build ``<prefix>_<epoch-ms>_<5-char base36>``.

    Args:
        prefix: Identifier kind, e.g. ``session`` or ``thought``
        timestamp: Unix timestamp in seconds (optional, uses current time if None)
    """
    suffix = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f'{prefix}_{to_epoch_ms(timestamp)}_{suffix}'


def generate_unique_id(prefix: str, exists: Callable[[str], bool], timestamp: Optional[float] = None) -> str:
    """Generate an identifier, re-rolling the random suffix while ``exists`` reports a collision.

    Raises:
        RuntimeError: If no free identifier was found within MAX_GENERATION_ATTEMPTS
    """
    for _ in range(MAX_GENERATION_ATTEMPTS):
        candidate = generate_id(prefix, timestamp)
        if not exists(candidate):
            return candidate
    raise RuntimeError(f'Could not generate a unique {prefix} identifier after {MAX_GENERATION_ATTEMPTS} attempts')


def is_valid_session_id(value: str) -> bool:
    """Session ids double as file names: letters, digits, ``_ - .``, no leading dot."""
    return bool(value) and _SESSION_ID_PATTERN.match(value) is not None
