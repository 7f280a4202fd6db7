"""Password hashing utilities."""

import bcrypt

from erp_api.config import get_settings


class PasswordService:
    """One-way password hashing backed by bcrypt."""

    def __init__(self, rounds: int | None = None) -> None:
        """Initialize with a bcrypt cost factor.

        Args:
            rounds: bcrypt cost factor (defaults to PASSWORD_HASH_ROUNDS)
        """
        self.rounds = rounds if rounds is not None else get_settings().password_hash_rounds
        # Same cost factor as real hashes; compared against when no account matches
        self.dummy_hash = self.hash_password("invalid-credentials")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        bcrypt compares digests in constant time.

        Args:
            password: Plain text password
            hashed: Hashed password

        Returns:
            True if password matches
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
            # Invalid hash format or encoding issues
            return False


# Singleton instance
_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the password service singleton.

    Returns:
        PasswordService instance
    """
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service
