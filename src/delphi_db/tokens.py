"""Session token generation.

Tokens are ``length`` hex characters taken from ``length`` bytes of OS
entropy.  Hex encoding doubles the byte count, so reading ``length`` bytes
always leaves enough characters to truncate to.
"""

import secrets

from delphi_estimation.errors import InvalidParameterError, RandomSourceError

DEFAULT_TOKEN_LENGTH = 32


def generate_token(length: int = DEFAULT_TOKEN_LENGTH) -> str:
    """Return a random hex token of exactly ``length`` characters."""
    if length <= 0:
        raise InvalidParameterError(
            f"Invalid token length provided: {length}, should be > 0"
        )
    try:
        raw = secrets.token_bytes(length)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError("Unable to read from the random source") from exc
    return raw.hex()[:length]
