"""Authenticated session state and role landing paths."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserRole(str, Enum):
    ADMIN = "admin"
    PROVIDER = "provider"
    CLIENT = "client"


LANDING_PATHS: dict[UserRole, str] = {
    UserRole.ADMIN: "/admin",
    UserRole.PROVIDER: "/provider",
    UserRole.CLIENT: "/",
}

LOGIN_PATH = "/login"


def landing_path(role: Optional[UserRole]) -> str:
    """Dashboard path for a role; anything unknown lands on the home page."""
    if role is None:
        return "/"
    return LANDING_PATHS.get(role, "/")


@dataclass(frozen=True)
class SessionContext:
    """
    Identity of the signed-in user.

    Created by the backend client at sign-in and dropped at sign-out.
    Screens receive it explicitly and never modify it.
    """
    user_id: str
    email: str
    role: UserRole
    access_token: str
    name: str = ""

    @property
    def landing_path(self) -> str:
        return landing_path(self.role)


class UserAccount(BaseModel):
    """Row of the users table, as listed on the admin users screen."""
    id: str
    name: str
    email: str
    role: UserRole = UserRole.CLIENT
    phone: Optional[str] = None
    address: Optional[str] = None
