# medtrack/services/password_service.py
from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """Salted, slow, self-describing password hashes.

    The digest embeds method, cost and salt (``pbkdf2:sha256:600000$salt$hash``)
    so verification needs nothing but the digest. Hashing cost is the defense
    against offline brute force, so results are never cached.
    """

    def __init__(self, method: str = "pbkdf2:sha256:600000", salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        # errors (bad method string, no entropy) propagate to the caller
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, digest: str) -> bool:
        if not digest or plaintext is None:
            return False
        return check_password_hash(digest, plaintext)
