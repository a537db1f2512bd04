"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from uni_schedule.domain.users.repositories import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """Werkzeug hashes (per-hash random salt) over the password plus an app-wide salt."""

    def __init__(self, salt: str = "") -> None:
        self._salt = salt

    def _salted(self, password: str) -> str:
        return f"{password}{self._salt}"

    def hash(self, password: str) -> str:
        return str(generate_password_hash(self._salted(password)))

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, self._salted(password)))
        except (ValueError, TypeError):
            return False
