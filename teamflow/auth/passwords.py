"""
TEAMFLOW Core API - Password Hashing

bcrypt hashing with automatic salting and a configurable work factor.
"""

import bcrypt

# bcrypt only considers the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """One-way hash and verify of user passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = password.encode("utf-8")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"),
                hashed_password.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, plain_password: str) -> bool:
        """
        Spend the same work as a real verification against a throwaway hash.

        Used when no stored hash exists so that response timing does not reveal
        whether an account exists. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"teamflow-dummy", bcrypt.gensalt(rounds=self.rounds))
        try:
            bcrypt.checkpw(plain_password.encode("utf-8"), self._dummy_hash)
        except ValueError:
            pass
        return False
