"""
Jersey Catalog API - User Repository
Generic CRUD over users plus password hashing and credential checks.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from database.schema import tables
from models.actor import ActorContext
from utils.logger import log_auth_event

from .generic_repository import GenericRepository, UpdateResult

PASSWORD_COLUMN = "password"

# Writable only by administrators
PRIVILEGED_COLUMNS = ("email", "role_id", "active", "client_id")


def privileged_grants(actor: Optional[ActorContext]) -> Dict[str, tuple]:
    """Capability arguments for user updates made by this actor."""
    if actor is not None and actor.is_admin:
        return {"granted": PRIVILEGED_COLUMNS, "restricted": ()}
    return {"granted": (), "restricted": PRIVILEGED_COLUMNS}


class UserRepository(GenericRepository):
    """Repository for the users table."""

    table = tables.USERS

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.find_by("email", email)

    def create(self, data: Mapping[str, Any]) -> Any:
        return super().create(self._hash_password(data))

    def update(self,
               key: Any,
               data: Mapping[str, Any],
               granted: Iterable[str] = (),
               restricted: Iterable[str] = ()) -> UpdateResult:
        return super().update(key, self._hash_password(data), granted=granted, restricted=restricted)

    def update_as(self, actor: Optional[ActorContext], key: Any, data: Mapping[str, Any]) -> UpdateResult:
        """Update with the privileged columns granted or withheld for this actor."""
        return self.update(key, data, **privileged_grants(actor))

    def verify_credentials(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Check an email/password pair.

        Returns:
            The user row when the password matches, else None
        """
        user = self.find_by_email(email)
        if user is None or not user.get(PASSWORD_COLUMN):
            log_auth_event("login_unknown_email", email=email)
            return None
        if not check_password_hash(user[PASSWORD_COLUMN], password):
            log_auth_event("login_bad_password", user_id=user.get("id"), email=email)
            return None
        return user

    def deactivate(self, user_id: int) -> bool:
        """Unsubscribe: mark the account inactive."""
        return self.set_fields(user_id, {"active": 0})

    @staticmethod
    def _hash_password(data: Mapping[str, Any]) -> Dict[str, Any]:
        data = dict(data)
        if data.get(PASSWORD_COLUMN):
            data[PASSWORD_COLUMN] = generate_password_hash(data[PASSWORD_COLUMN])
        return data
