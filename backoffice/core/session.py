"""
Session and capability value objects.

A Session is built once per request from the bearer token and passed
explicitly to services; nothing reads the authenticated user from global
state. Capabilities are derived from the session's role at the same time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from backoffice.config.permissions_config import ROLE_CAPABILITIES
from backoffice.core.exceptions import Forbidden, Unauthenticated


@dataclass(frozen=True)
class Session:
    user_id: str
    access_token: str
    email: Optional[str] = None
    role: Optional[str] = None
    app_metadata: Dict[str, Any] = field(default_factory=dict)

    def ensure_valid(self) -> "Session":
        if not self.user_id:
            raise Unauthenticated("No authenticated user")
        if not self.access_token:
            raise Unauthenticated("User access token not found")
        return self


@dataclass(frozen=True)
class Capabilities:
    can_read: bool = False
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False
    can_manage_taxonomy: bool = False
    can_manage_roles: bool = False

    @classmethod
    def for_role(cls, role: Optional[str]) -> "Capabilities":
        granted = ROLE_CAPABILITIES.get(role or "", [])
        return cls(**{name: True for name in granted})

    def require(self, capability: str) -> None:
        if not getattr(self, capability, False):
            raise Forbidden(f"Insufficient permissions. Required: {capability}")

    def as_list(self):
        return [name for name, granted in self.__dict__.items() if granted]
