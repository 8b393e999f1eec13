"""
Public identifier generation.
Identifiers look like ``<prefix>_<10 base62 characters>``, e.g. ``sc_1a2B3c4D5e``.
"""

import secrets
import string

from .error import InvalidParameterError

PUBLIC_ID_LENGTH = 10

_ALPHABET = string.digits + string.ascii_letters


def new_public_id(prefix: str) -> str:
    """
    Generate a new public id with the given type prefix.

    :param prefix: Entity type prefix, e.g. "sc" for session connections.
    :returns: The public id.
    :raises InvalidParameterError: If the prefix is empty.
    """
    if not prefix:
        raise InvalidParameterError(
            "new public id", ValueError("missing prefix")
        )
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(PUBLIC_ID_LENGTH))
    return f"{prefix}_{suffix}"
