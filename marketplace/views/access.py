"""Role-gated routes: who may open the admin and provider areas."""

from typing import Optional

from marketplace.logging_context import get_session_logger
from marketplace.schemas.session_schema import LOGIN_PATH, SessionContext, UserRole

logger = get_session_logger(__name__)

PROTECTED_PREFIXES: list[tuple[str, UserRole]] = [
    ("/admin", UserRole.ADMIN),
    ("/provider", UserRole.PROVIDER),
]


def resolve_access(
    session: Optional[SessionContext], required_role: Optional[UserRole] = None
) -> Optional[str]:
    """Return the path to redirect to, or None when access is granted.

    Anonymous visitors go to the login page. Signed-in users with the
    wrong role go to their own dashboard.
    """
    if session is None:
        return LOGIN_PATH
    if required_role is not None and session.role != required_role:
        logger.info(
            "%s (%s) denied %s area", session.email, session.role.value, required_role.value
        )
        return session.landing_path
    return None


def required_role_for(path: str) -> Optional[UserRole]:
    """Role a path is restricted to; None for public and client pages."""
    for prefix, role in PROTECTED_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return role
    return None


class RoleGate:
    """Tracks the signed-in session and answers navigation requests."""

    def __init__(self, session: Optional[SessionContext] = None) -> None:
        self.session = session

    def sign_in(self, session: SessionContext) -> str:
        """Remember the session and return where the user lands."""
        self.session = session
        return session.landing_path

    def sign_out(self) -> str:
        self.session = None
        return LOGIN_PATH

    def navigate(self, path: str) -> str:
        """Final path shown for a requested path."""
        required = required_role_for(path)
        if required is None:
            return path
        return resolve_access(self.session, required) or path
