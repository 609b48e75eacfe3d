"""
Jersey Catalog API - Actor Context
Request-scoped identity of the authenticated caller.

Built once per request by the login_required decorator and passed explicitly
to whatever needs it (authorization checks, the pricing overlay).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

ROLE_ADMIN = 1
ROLE_EDITOR = 2
ROLE_CLIENT = 3

ROLES = {
    ROLE_ADMIN: "admin",
    ROLE_EDITOR: "editor",
    ROLE_CLIENT: "client",
}


@dataclass(frozen=True)
class ActorContext:
    """
    Authenticated caller.

    Attributes:
        user_id: users.id
        role_id: 1 admin, 2 editor, 3 client
        client_id: Affiliated client (source of the price discount), if any
        email: Login email
        first_name: Display name
        last_name: Display surname
        last_activity: Unix timestamp of the previous authenticated request
    """
    user_id: int
    role_id: int
    client_id: Optional[int] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    last_activity: Optional[float] = None

    @property
    def is_admin(self) -> bool:
        return self.role_id == ROLE_ADMIN

    @property
    def is_staff(self) -> bool:
        """Admins and editors manage the catalog."""
        return self.role_id in (ROLE_ADMIN, ROLE_EDITOR)

    def has_role(self, *roles: int) -> bool:
        return self.role_id in roles

    def to_session(self) -> Dict[str, Any]:
        """JSON-safe dict stored in the signed session cookie."""
        data = asdict(self)
        data.pop("last_activity")
        return data

    @classmethod
    def from_session(cls, data: Mapping[str, Any], last_activity: Optional[float] = None) -> 'ActorContext':
        return cls(
            user_id=int(data["user_id"]),
            role_id=int(data["role_id"]),
            client_id=int(data["client_id"]) if data.get("client_id") is not None else None,
            email=data.get("email"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            last_activity=last_activity,
        )

    @classmethod
    def from_user(cls, user: Mapping[str, Any]) -> 'ActorContext':
        """Build the context from a users row at login."""
        return cls.from_session({
            "user_id": user["id"],
            "role_id": user["role_id"],
            "client_id": user.get("client_id"),
            "email": user.get("email"),
            "first_name": user.get("first_name"),
            "last_name": user.get("last_name"),
        })
