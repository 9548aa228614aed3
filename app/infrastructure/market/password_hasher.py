"""
Adapter: Password hashing.

Implements PasswordHasher port with werkzeug's salted hash helpers.
"""

from werkzeug.security import check_password_hash, generate_password_hash

from app.domain.market.ports import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """Hashes with werkzeug's default method (scrypt / pbkdf2)."""

    def hash(self, raw_password: str) -> str:
        return generate_password_hash(raw_password)

    def verify(self, raw_password: str, password_hash: str) -> bool:
        return check_password_hash(password_hash, raw_password)
