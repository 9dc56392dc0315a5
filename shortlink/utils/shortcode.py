"""Shortcode generation utility

This module provides a helper function for generating short, random, fixed-length
Base62 shortcodes.

Functions:
    generate_shortcode(length=6, salt='default_salt'):
        Generate a random shortcode suitable for use as a URL slug.

Example:
    >>> from shortlink.utils import generate_shortcode
    >>> generate_shortcode()
    'Gh71WP'
"""

import string
import uuid

import xxhash


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = 6, salt: str = 'default_salt') -> str:
    """Generate a random, fixed-length Base62 shortcode.

    A fresh UUID4 provides the entropy. It is hashed (salted) with xxhash and the
    64-bit digest is folded into the BASE^length space, which spreads the UUID's
    randomness over every character instead of keeping only a hex prefix.

    Args:
        length (int, optional):
            Length of the resulting shortcode. Defaults to 6.
            Must be between 1 and 10 (62^10 still fits in the 64-bit digest).

        salt (str, optional):
            String mixed into the hash input.

    Returns:
        str: A random alphanumeric shortcode.

    NOTE:
        - Codes are random, so collisions are possible (1 in 62^6 per pair at the
          default length). Callers must check the data store before use.
        - The alphabet is Base62 safe: [a-zA-Z0-9].
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if not 1 <= length <= 10:
        raise ValueError(f'Length must be between 1 and 10 (given value: {length}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')

    value = xxhash.xxh64_intdigest(f'{salt}:{uuid.uuid4().hex}') % BASE**length

    # Base62 encoding, most significant digit first, padded to a fixed length
    return ''.join(reversed([ALPHABET[(value // BASE**i) % BASE] for i in range(length)]))
