"""Shortcode generation utility

This module provides a helper function for generating short, random,
URL-safe identifiers for new mappings.

Functions:
    generate_shortcode(length=6):
        Generate a random Base62 string suitable for use as a URL slug.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q7RbT2'
"""

import secrets
import string


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = 6) -> str:
    """Generate a random fixed-length Base62 shortcode.

    Characters are drawn from a cryptographically secure source, so the
    shortcode can't be predicted from previously issued ones.

    Args:
        length (int, optional):
            Number of characters in the shortcode.
            Defaults to 6, i.e. 62**6 (~5.7e10) possible shortcodes.

    Returns:
        str: A random alphanumeric shortcode.

    NOTE:
        - Collisions are possible in principle. The caller is responsible
          for claiming the shortcode atomically in the data store.
        - The alphabet is Base62 safe: [a-zA-Z0-9].
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
