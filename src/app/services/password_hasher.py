"""
Password Hasher

One-way bcrypt hashing for account passwords.
"""

import bcrypt


class EncodingError(ValueError):
    """Raised when a password cannot be hashed (missing or empty input)"""


class PasswordHasher:
    """
    Salted bcrypt hashing with a fixed work factor.

    Verification goes through bcrypt.checkpw, which compares in constant time.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        if not plaintext:
            raise EncodingError("Password must be a non-empty string")
        password_hash = bcrypt.hashpw(
            plaintext.encode("utf-8"), bcrypt.gensalt(self.rounds)
        )
        return password_hash.decode("utf-8")

    def verify(self, plaintext: str, password_hash: str) -> bool:
        if not plaintext or not password_hash:
            return False
        return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))

    def burn(self, plaintext: str) -> None:
        """Spend one verification worth of work when there is no hash to check"""
        bcrypt.checkpw((plaintext or "").encode("utf-8"), self._dummy_hash)
