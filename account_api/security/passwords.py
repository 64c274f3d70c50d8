"""bcrypt password hashing. Salt is generated per hash and embedded in it."""

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; newer releases reject longer input outright.
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_secret(password), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        """True if password matches hashed. A malformed hash never matches."""
        try:
            return bcrypt.checkpw(_secret(password), hashed.encode("ascii"))
        except ValueError:
            return False
