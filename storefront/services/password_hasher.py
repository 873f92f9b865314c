"""Password hashing and verification."""

import bcrypt


class PasswordHasher:
    """Salted bcrypt hashing for account passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plain text password with a fresh salt.

        Args:
            password: Plain text password (at most 72 bytes once encoded)

        Returns:
            bcrypt hash as a string
        """
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plain text password against a stored hash.

        Returns:
            True if the password matches, False otherwise (including malformed hashes)
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
