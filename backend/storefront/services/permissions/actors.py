"""
The identity a request acts as.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ActingUser:
    """
    Caller identity: a user id (None for guests) and the admin capability.
    """

    id: int | None
    is_admin: bool = False

    @classmethod
    def guest(cls) -> "ActingUser":
        return cls(id=None, is_admin=False)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "ActingUser":
        """
        Build from decoded token claims (``sub`` and ``is_admin``).
        A missing ``sub`` yields a guest.
        """
        sub = claims.get("sub")
        if sub is None:
            return cls.guest()
        return cls(id=int(sub), is_admin=bool(claims.get("is_admin", False)))

    @property
    def is_guest(self) -> bool:
        return self.id is None
