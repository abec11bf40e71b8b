"""Credential directory: maps a username + secret pair to a principal"""
import hmac
from typing import Dict, Iterable, Optional, Tuple

from tokengate.models.principal import Principal

# (username, secret, role)
DEFAULT_USERS: Tuple[Tuple[str, str, str], ...] = (
    ("user1", "password1", "User"),
    ("user2", "password2", "User"),
    ("admin", "admin123", "Admin"),
)

ADMIN_ROLE = "Admin"


class UserDirectory:
    """Fixed in-process user directory.

    Usernames are case-sensitive. A failed lookup is a normal negative
    result and returns ``None``.
    """

    def __init__(self, users: Iterable[Tuple[str, str, str]] = DEFAULT_USERS):
        self._users: Dict[str, Tuple[str, Principal]] = {
            username: (secret, Principal(username=username, role=role))
            for username, secret, role in users
        }

    def authenticate(self, username: str, secret: str) -> Optional[Principal]:
        """Return the principal for a matching username/secret pair, else None"""
        record = self._users.get(username)
        if record is None:
            return None

        expected_secret, principal = record
        if not hmac.compare_digest(expected_secret.encode(), secret.encode()):
            return None
        return principal
