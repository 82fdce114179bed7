"""
Random secret value generation.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import secrets
import string

from propvault.errors import InvalidLength

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SPECIAL = string.punctuation

DEFAULT_CLASSES = (LOWERCASE, UPPERCASE, DIGITS)

_random = secrets.SystemRandom()


def character_classes(use_special_characters: bool = False) -> tuple[str, ...]:
    """Get the character classes a secret is drawn from."""
    if use_special_characters:
        return DEFAULT_CLASSES + (SPECIAL,)
    return DEFAULT_CLASSES


def generate(length: int, use_special_characters: bool = False) -> str:
    """Generate a random secret.

    Each character picks a class uniformly, then a character uniformly
    from that class, so short classes such as digits are not drowned out
    by letters.

    Args:
        length: Number of characters
        use_special_characters: Also draw from punctuation

    Returns:
        Random string of the requested length
    """
    if length <= 0:
        raise InvalidLength(f"Secret length must be positive, got {length}")

    classes = character_classes(use_special_characters)
    return "".join(
        _random.choice(_random.choice(classes))
        for _ in range(length)
    )
