"""
Core dependencies for route protection and capability checking
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backoffice.database.supabase_client import get_supabase
from backoffice.modules.auth.service import AuthService
from backoffice.core.session import Session, Capabilities
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Session:
    """Build the request session from the bearer token; cached on request.state."""
    if getattr(request.state, "session", None) is not None:
        return request.state.session
    session = auth_service.build_session(credentials.credentials).ensure_valid()
    request.state.session = session
    return session


def get_capabilities(session: Session = Depends(get_session)) -> Capabilities:
    return Capabilities.for_role(session.role)


def require_capability(capability: str):
    """Factory function to create capability check dependency"""
    def check_capability(
        session: Session = Depends(get_session),
        capabilities: Capabilities = Depends(get_capabilities)
    ) -> Session:
        """Dependency to check if the session's role grants the capability"""
        capabilities.require(capability)
        return session
    return check_capability
