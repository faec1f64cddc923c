"""
Random meeting codes.
"""

import random
import secrets
import string

CODE_ALPHABET = string.digits + string.ascii_uppercase
DEFAULT_CODE_LENGTH = 6
DEFAULT_MAX_CODE_ATTEMPTS = 10


class CodeGenerator:
    """
    Produces short uppercase base-36 codes.

    The generator is only a randomness source: it does not know which codes
    are taken. Callers check the store and ask again on collision.
    """

    def __init__(self, length: int = DEFAULT_CODE_LENGTH, rng: random.Random | None = None):
        if length <= 0:
            raise ValueError(f"Code length must be positive, got {length}")
        self.length = length
        self._rng = rng or secrets.SystemRandom()

    def next(self) -> str:
        """Return a fresh random code."""
        return "".join(self._rng.choice(CODE_ALPHABET) for _ in range(self.length))
